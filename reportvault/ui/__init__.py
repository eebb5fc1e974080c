"""Textual dashboard and secure viewer screen."""
