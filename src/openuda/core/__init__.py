"""Core schemas, configuration, errors and run bookkeeping."""
