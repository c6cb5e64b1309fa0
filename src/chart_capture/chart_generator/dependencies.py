from __future__ import annotations

import matplotlib

matplotlib.use("Agg")  # Use non-GUI backend to prevent threading issues
import matplotlib.pyplot as plt
import numpy as np
from matplotlib import ticker

__all__ = ["plt", "np", "ticker"]
