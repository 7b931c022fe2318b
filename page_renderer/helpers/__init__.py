"""Template helpers.

Pure text transforms live in formatting, text and sequences; registry wires
them, together with localisation, into the table handed to the template
engine.
"""
