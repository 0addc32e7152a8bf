"""Adapters that turn render results into web framework responses.

Each adapter imports its framework directly; install the matching extra
(``pip install easyviewer[web]`` for Starlette) before importing it.
"""
