"""Services subpackage - admin table maintenance and job intake."""
