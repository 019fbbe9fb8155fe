import logging

import networkx as nx
import numpy as np
import pytest

from niceembed.embedding import Embedding
from niceembed.mcn import (annealed_minimum_intersections_embedding,
                           minimum_intersections_embedding)
from niceembed.synthetic import complete_bipartite_embedding


def test_two_vertex_graph_single_run():
    G = nx.Graph([(0, 1)])
    embedding = minimum_intersections_embedding(G, 1)
    assert isinstance(embedding, Embedding)
    assert embedding.intersections() == 0


@pytest.mark.parametrize('runs', [0, -1, 1.5])
def test_rejects_non_positive_integer_runs(runs):
    with pytest.raises(ValueError):
        minimum_intersections_embedding(nx.path_graph(3), runs)


@pytest.mark.parametrize('runs', ['abc', None, True, [2]])
def test_rejects_non_numeric_runs(runs):
    with pytest.raises(TypeError):
        minimum_intersections_embedding(nx.path_graph(3), runs)


def test_rejects_bad_graphs():
    with pytest.raises(TypeError):
        minimum_intersections_embedding('graph', 3)
    with pytest.raises(ValueError):
        minimum_intersections_embedding(nx.DiGraph(), 3)


def test_coerces_numeric_arguments():
    embedding = minimum_intersections_embedding(nx.path_graph(4), '3',
                                                width='100', height=50,
                                                rng=0)
    for v in embedding.vertices:
        assert 0. <= v.position.x <= 100.
        assert 0. <= v.position.y <= 50.


def test_returns_first_embedding_with_fewest_crossings():
    G = nx.complete_graph(6)
    rng = np.random.default_rng(8)
    samples = [Embedding.for_graph(G, width=480, height=480, rng=rng)
               for _ in range(15)]
    counts = [sample.intersections() for sample in samples]
    best = minimum_intersections_embedding(G, 15, rng=8)
    assert best.intersections() == min(counts)
    assert best == samples[counts.index(min(counts))]


def test_more_runs_never_worse_for_fixed_seed():
    G = nx.petersen_graph()
    counts = [minimum_intersections_embedding(G, runs, rng=21).intersections()
              for runs in (1, 5, 20, 60)]
    assert counts == sorted(counts, reverse=True)


def test_verbose_logs_progress(caplog):
    with caplog.at_level(logging.INFO, logger='niceembed'):
        minimum_intersections_embedding(nx.complete_graph(5), 3, rng=0,
                                        verbose=True)
    assert 'run 0 | best' in caplog.text


def test_annealed_search_never_worse_than_start():
    start = complete_bipartite_embedding(3, 3, 300)
    G = nx.complete_bipartite_graph(3, 3)
    G = nx.relabel_nodes(G, {v: v + 1 for v in G})
    start_pos = start.pos
    embedding = annealed_minimum_intersections_embedding(
        G, 200, 300, 300, P0=start, rng=2)
    assert embedding.intersections() <= start.intersections() == 9
    assert start.pos == start_pos
    for v in embedding.vertices:
        assert 0. <= v.position.x <= 300.
        assert 0. <= v.position.y <= 300.


def test_annealed_search_is_reproducible():
    G = nx.petersen_graph()
    a = annealed_minimum_intersections_embedding(G, 100, rng=13)
    b = annealed_minimum_intersections_embedding(G, 100, rng=13)
    assert a == b
    assert a.intersections() == b.intersections()


def test_annealed_search_validates_arguments():
    G = nx.path_graph(3)
    with pytest.raises(TypeError):
        annealed_minimum_intersections_embedding(None, 10)
    with pytest.raises(ValueError):
        annealed_minimum_intersections_embedding(G, 0)
    with pytest.raises(ValueError):
        annealed_minimum_intersections_embedding(G, 10, width=-5)
    with pytest.raises(ValueError):
        annealed_minimum_intersections_embedding(G, 10, T0=0)
    with pytest.raises(ValueError):
        annealed_minimum_intersections_embedding(
            G, 10, P0=Embedding.for_graph(nx.path_graph(2)))
