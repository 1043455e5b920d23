from fundtrace.graph_builder import build_graph, account_stats


def test_edges_match_transactions(make_df):
    df = make_df([
        ("A", "B", 100, 0),
        ("A", "B", 50, 1),
        ("B", "C", 70, 2),
        ("C", "A", 10, 3),
    ])
    G = build_graph(df)

    expected = set(zip(df["sender_id"], df["receiver_id"]))
    assert set(G.edges()) == expected
    assert G["A"]["B"]["tx_count"] == 2
    assert G["A"]["B"]["total_amount"] == 150.0


def test_node_aggregates(make_df):
    df = make_df([
        ("A", "B", 100, 0),
        ("A", "C", 40, 1),
        ("C", "A", 25, 2),
    ])
    stats = account_stats(build_graph(df))

    assert stats["A"] == {"tx_count": 3, "total_sent": 140.0, "total_received": 25.0}
    assert stats["B"] == {"tx_count": 1, "total_sent": 0.0, "total_received": 100.0}
    assert stats["C"]["tx_count"] == 2


def test_senders_come_first_in_node_order(make_df):
    df = make_df([
        ("A", "B", 1, 0),
        ("D", "E", 1, 1),
        ("B", "C", 1, 2),
    ])
    G = build_graph(df)

    assert list(G.nodes()) == ["A", "D", "B", "E", "C"]


def test_successor_order_follows_first_payment(make_df):
    df = make_df([
        ("A", "Z", 1, 0),
        ("A", "M", 1, 1),
        ("A", "Z", 1, 2),
        ("A", "B", 1, 3),
    ])
    G = build_graph(df)

    assert list(G.successors("A")) == ["Z", "M", "B"]


def test_empty_input_yields_empty_graph(make_df):
    G = build_graph(make_df([]))

    assert G.number_of_nodes() == 0
    assert G.number_of_edges() == 0
