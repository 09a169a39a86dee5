"""Data subpackage - pricing tables and the config loader."""
