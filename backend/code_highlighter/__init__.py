"""
Code Highlighter

Stores colored highlights and comments on source-code ranges, keeps them in
place while files are edited, and serves them to the editor over HTTP.
"""

__version__ = "1.0.0"
