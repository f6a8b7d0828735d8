"""
Services — locate project files, plan steps, render and write scripts.
"""
