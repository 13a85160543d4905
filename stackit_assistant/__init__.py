"""
StackIT Assistant: conversational ticket intake for the help desk.
"""
__version__ = "1.0.0"
