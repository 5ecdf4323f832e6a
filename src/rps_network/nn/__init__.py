"""Numeric engine of the predictor.

history.py keeps the sliding input window, params.py owns the weights and
their initialization, model.py holds the forward/backward passes and the
Network aggregate, train.py plays scripted matches to train it online.
"""

from __future__ import annotations
