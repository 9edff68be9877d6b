"""Scaffold an Expo Router + MVVM folder structure into an Expo project."""

__version__ = "1.0.0"
