"""
BRB Scan Server
===============

A Flask-based server that recognises Jordanian dinar banknotes in camera
frames using an on-device TensorFlow Lite model.

Modules:
    - analyzers: Classification, decision rules and scanning sessions
    - inference: Frame conversion, preprocessing and the TFLite runner
    - api: Flask API routes and endpoints
    - utils: Camera ownership and mobile session registry
"""

__version__ = "1.0.0"
__author__ = "BRB Scan Team"
