"""
Inspection plots for segmented data.

Draws a flat vector as bars coloured by segment, marks segment heads, and
optionally overlays a scan of the same vector. Meant for eyeballing a
segmentation or a scan result while debugging; matplotlib is imported
lazily so the rest of the package never needs it.

Author: PySegScan developers
"""

import numpy as np

from ..primitives import Vector
from ..segmented import as_segments


def _host(values):
	if isinstance(values, Vector):
		return values.to_numpy()
	return np.asarray(values)


def plot_segments(values, segments, scans=None, ax=None, cmap='tab10', title=None):
	"""
	Plot a segmented vector.

	Args:
		values: Data (Vector or array-like)
		segments: Segment lengths (Vector or array-like)
		scans: Optional scan result of the same length, drawn as a step line
		ax: matplotlib Axes to draw into. A new figure is created when omitted
		cmap (str): Colormap cycling over segments
		title (str, optional): Axes title

	Returns:
		matplotlib.axes.Axes: The axes drawn into
	"""
	import matplotlib.pyplot as plt

	vals = _host(values)
	lengths = as_segments(segments).to_numpy()
	owner = np.repeat(np.arange(lengths.size), lengths)
	heads = (np.cumsum(lengths) - lengths)[lengths > 0]

	if ax is None:
		_, ax = plt.subplots(figsize=(max(4, 0.4 * max(vals.size, 1)), 3))

	colours = plt.get_cmap(cmap)
	x = np.arange(vals.size)
	ax.bar(x, vals, color=[colours(k % colours.N) for k in owner], edgecolor='k', linewidth=0.5, label='values')

	for h in heads:
		ax.axvline(h - 0.5, color='k', linestyle='--', linewidth=0.8)

	if scans is not None:
		ax.step(x, _host(scans), where='mid', color='crimson', linewidth=1.5, label='scan')
		ax.legend(loc='best')

	ax.set_xlabel('flat index')
	ax.set_xticks(x)
	if title is not None:
		ax.set_title(title)
	return ax
