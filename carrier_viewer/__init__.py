"""Read-only browser for the FMCSA carrier registry spreadsheet.

Fetches windows of rows from the Google Visualization query endpoint,
normalizes them to a fixed field catalogue and derives the filtered/sorted
grid shown to the user.
"""

__version__ = "0.1.0"
