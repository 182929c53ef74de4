"""HTTP routes for the quote form."""
