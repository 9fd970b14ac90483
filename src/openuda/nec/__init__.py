"""NEC-2 translation protocol and solver lifecycle."""
