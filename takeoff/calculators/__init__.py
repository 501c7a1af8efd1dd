"""
Per-kind calculation engine.

Pure Python math over canonical metric inputs. Given a kind's parsed params,
produce its derived quantities plus the list of defaults that were assumed.
"""
