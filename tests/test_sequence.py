"""Tests for pagegen.sequence."""

from conftest import make_doc
from pagegen.sequence import order_by_date, sequence


class TestSequence:
    def test_orders_newest_first_and_links_neighbours(self):
        jan = make_doc("/jan/", "2021-01-01")
        feb = make_doc("/feb/", "2021-02-01")
        mar = make_doc("/mar/", "2021-03-01")
        chain = sequence([jan, feb, mar], published=True)
        assert [item.document for item in chain] == [mar, feb, jan]
        middle = chain[1]
        assert middle.previous is jan
        assert middle.next is mar

    def test_boundaries_are_none(self):
        docs = [make_doc(f"/p{i}/", f"2021-01-0{i}") for i in range(1, 5)]
        chain = sequence(docs, published=True)
        assert len(chain) == 4
        assert chain[0].next is None
        assert chain[-1].previous is None

    def test_single_document_has_no_neighbours(self):
        chain = sequence([make_doc("/only/", "2021-01-01")], published=True)
        assert chain[0].previous is None
        assert chain[0].next is None

    def test_empty_partition(self):
        assert sequence([make_doc("/a/", "2021-01-01")], published=False) == []

    def test_partitions_are_independent(self):
        pub_old = make_doc("/pub-old/", "2021-01-01")
        draft = make_doc("/draft/", "2021-01-15", published=False)
        pub_new = make_doc("/pub-new/", "2021-02-01")
        docs = [pub_old, draft, pub_new]

        published = sequence(docs, published=True)
        assert [item.document for item in published] == [pub_new, pub_old]
        assert published[0].previous is pub_old

        drafts = sequence(docs, published=False)
        assert [item.document for item in drafts] == [draft]
        assert drafts[0].previous is None and drafts[0].next is None

    def test_length_matches_partition(self):
        docs = [make_doc(f"/p{i}/", f"2021-01-0{i}", published=i % 2 == 0) for i in range(1, 8)]
        assert len(sequence(docs, published=True)) == 3
        assert len(sequence(docs, published=False)) == 4


class TestOrderByDate:
    def test_ties_keep_source_order(self):
        first = make_doc("/first/", "2021-01-01")
        second = make_doc("/second/", "2021-01-01")
        newer = make_doc("/newer/", "2021-01-02")
        assert order_by_date([first, second, newer]) == [newer, first, second]
