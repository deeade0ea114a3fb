"""mygpo_api command line interface."""
