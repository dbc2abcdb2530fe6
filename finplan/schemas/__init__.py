"""Pydantic data contracts shared by the calculators and the API."""
