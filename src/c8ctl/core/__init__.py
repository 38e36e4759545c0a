"""Core c8ctl components: configuration, cluster client and deployment."""
