"""Quotation document service: financial calculation, markup composition, PDF rendering."""
