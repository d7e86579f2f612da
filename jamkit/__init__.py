"""Building blocks of the Jam build tool: regular expressions, output filters, command spawning, path names, variables, rules, parse nodes, scanning, timestamps and target search."""

__version__ = "0.1.0"