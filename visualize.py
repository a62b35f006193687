'''
Draw the traffic grid with NetworkX and Matplotlib
'''


# Standard Library:
from collections.abc import Sequence
from itertools import pairwise

# Third-Party:
import matplotlib.pyplot as plt
import networkx as nx

# Local:
from intersection import Intersection


def draw_network(grid: nx.DiGraph, intersections: Sequence[Intersection],
                 route: Sequence[int] | None=None, ax: plt.Axes | None=None,
                 title: str | None=None) -> plt.Axes:
    '''
    Plot intersections at their grid positions, shaded by total queue, with
    the emergency route (if any) drawn in red
    '''
    if ax is None:
        _, ax = plt.subplots()

    # North is up:  row 0 on top
    pos = {node: (data['col'], -data['row']) for node, data in grid.nodes(data=True)}
    queues = [intersections[node].total_queue for node in grid.nodes]

    # Each street is drawn once even though the graph stores both directions
    streets = {tuple(sorted(edge)) for edge in grid.edges}
    nx.draw_networkx_edges(grid, pos, edgelist=sorted(streets), ax=ax, arrows=False,
                           edge_color='lightgray', width=2)
    nodes = nx.draw_networkx_nodes(grid, pos, ax=ax, node_color=queues, cmap='YlOrRd',
                                   vmin=0, vmax=max(max(queues), 1), node_size=600)
    nx.draw_networkx_labels(grid, pos, ax=ax, font_size=9)

    if route and len(route) > 1:
        nx.draw_networkx_edges(grid, pos, edgelist=list(pairwise(route)), ax=ax,
                               edge_color='red', width=3, arrows=True)

    ax.figure.colorbar(nodes, ax=ax, label='Vehicles queued')
    ax.set_title(title or 'Traffic Grid')
    ax.set_axis_off()
    return ax
