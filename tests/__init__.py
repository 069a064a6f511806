"""Test suite for the tablerunner package.

This package contains unit and integration tests validating row
extraction, command registration, step outcomes, and the execution
semantics of the table interpreter.
"""
