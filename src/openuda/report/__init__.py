"""Pattern plots and run-bundle reports."""
