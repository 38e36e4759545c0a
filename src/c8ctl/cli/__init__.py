"""c8ctl command-line interface."""
