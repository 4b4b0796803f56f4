"""Payment mechanisms by chain family."""
