"""
Core domain logic: models, configuration, parsing and summary composition.
"""
