"""Ticker registry services: format rules, reserved words, similarity and the registry itself."""
