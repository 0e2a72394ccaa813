"""Django project package for the careboard hospital-operations backend."""
