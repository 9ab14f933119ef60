"""Textual front-end and the components it draws."""
