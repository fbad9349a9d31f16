"""Infrastructure layer: filesystem, templates, crypto backends.

This layer depends on stdlib, the domain layer and third-party libs
(cryptography, Jinja2). It must never import from services, commands,
or output.
"""
