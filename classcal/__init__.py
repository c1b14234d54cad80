"""
classcal - class schedule manager with a month calendar view (CLI + interactive).
"""
