"""
Lingo SRS - spaced-repetition review engine for the language-learning backend.
"""
