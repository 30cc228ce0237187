"""
mdplay - Terminal Slide Player

Presents a deck of Markdown and asciinema (.cast) slides inside the terminal,
with progressive fragments, inline images, live reload and an optional
presenter view that follows along in the browser.
"""

__version__ = "1.0.0"
__author__ = "mdplay Team"
