"""Prediction and cross-league calibration for amateur pool leagues."""

__version__ = "0.1.0"
