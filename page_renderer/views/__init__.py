"""View rendering module for HTML pages.

The Renderer is the only way page data reaches a template: it owns the
Jinja2 environment, the installed helpers and the locks around output.
"""
