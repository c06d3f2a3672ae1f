"""Core domain package for notam-pager.

Core holds the polling state machine and its helpers without any HTTP or
file-specific code, keeping the delivery logic portable across upstream
sources and pager transports.
"""
