"""
Incremental Merkle Tree Unit Tests
Tests for imt/merkle/tree.py

Every mutation is cross-checked against the reference accumulator in
imt/merkle/reference.py at arity 2 and arity 5, depth 16.
"""
import pytest

from imt.crypto.hashing import FIELD_MODULUS, sha256_field_hash
from imt.merkle import IncrementalMerkleTree
from imt.schemas.errors import CapacityError, ConfigurationError, NotFoundError

from fixtures import DEPTH, NUMBER_OF_LEAVES, make_filled_pair, make_tree


class TestConstruction:
    """Tests for tree construction and parameter validation."""

    def test_missing_hash_raises(self, arity):
        """A tree needs a hash function."""
        with pytest.raises(ConfigurationError, match="Parameter 'hash' is not defined"):
            IncrementalMerkleTree(None, 33, 0, arity)

    def test_non_callable_hash_raises(self, arity):
        """The hash must be callable."""
        with pytest.raises(ConfigurationError, match="Parameter 'hash' is none of these types: function"):
            IncrementalMerkleTree(1, 33, 0, arity)

    def test_non_sequence_leaves_raises(self, arity):
        """Initial leaves must be an ordered sequence."""
        with pytest.raises(ConfigurationError, match="Parameter 'leaves' is none of these types"):
            IncrementalMerkleTree(sha256_field_hash, DEPTH, 0, arity, 2)

        with pytest.raises(ConfigurationError):
            IncrementalMerkleTree(sha256_field_hash, DEPTH, 0, arity, {1, 2})

    def test_too_many_leaves_raises(self, arity):
        """More than arity ** depth initial leaves is rejected."""
        leaves = list(range(100))

        with pytest.raises(ConfigurationError, match=f"cannot contain more than {arity ** 2} leaves"):
            IncrementalMerkleTree(sha256_field_hash, 2, 0, arity, leaves)

    @pytest.mark.parametrize("depth", [0, -1, 1.5, "16", True])
    def test_invalid_depth_raises(self, depth):
        """Depth must be an int >= 1."""
        with pytest.raises(ConfigurationError):
            IncrementalMerkleTree(sha256_field_hash, depth, 0)

    @pytest.mark.parametrize("arity", [0, 1, 2.0, None])
    def test_invalid_arity_raises(self, arity):
        """Arity must be an int >= 2."""
        with pytest.raises(ConfigurationError):
            IncrementalMerkleTree(sha256_field_hash, DEPTH, 0, arity)

    def test_configuration_error_is_value_error(self):
        """Callers catching ValueError still see configuration errors."""
        with pytest.raises(ValueError):
            IncrementalMerkleTree(sha256_field_hash, 0, 0)

    def test_initial_state(self, tree, arity):
        """A fresh tree exposes its parameters and no leaves."""
        assert tree.depth == DEPTH
        assert tree.leaves == []
        assert len(tree.zeroes) == DEPTH
        assert tree.arity == arity
        assert tree.capacity == arity ** DEPTH
        assert len(tree) == 0

    def test_zeroes_chain(self, tree, arity):
        """zeroes[l] is the digest of arity copies of zeroes[l-1]."""
        zeroes = tree.zeroes

        assert zeroes[0] == 0
        for level in range(1, DEPTH):
            assert zeroes[level] == sha256_field_hash([zeroes[level - 1]] * arity)

    def test_empty_root_is_zero_subtree_digest(self, tree, reference, arity):
        """The root of an empty tree is the empty-subtree digest at full height."""
        expected = sha256_field_hash([tree.zeroes[-1]] * arity)

        assert tree.root == expected
        assert tree.root == reference.root

    def test_accessors_return_copies(self, tree):
        """Mutating returned lists does not touch the tree."""
        tree.insert(1)

        tree.leaves.append(99)
        tree.zeroes.clear()

        assert tree.leaves == [1]
        assert len(tree.zeroes) == DEPTH

    def test_empty_leaves_list_matches_fresh_tree(self, arity):
        """leaves=[] is the same as no leaves."""
        assert make_tree(arity=arity, leaves=[]).root == make_tree(arity=arity).root

    @pytest.mark.parametrize("number_of_leaves", range(100, 116))
    def test_batch_build_matches_sequential_inserts(self, arity, number_of_leaves):
        """Batch construction yields the same root as inserting one by one."""
        leaves = list(range(number_of_leaves))

        batch = make_tree(arity=arity, leaves=leaves)
        sequential = make_tree(arity=arity)
        for leaf in leaves:
            sequential.insert(leaf)

        assert batch.depth == DEPTH
        assert len(batch.leaves) == number_of_leaves
        assert len(batch.zeroes) == DEPTH
        assert batch.arity == arity
        assert batch.root == sequential.root

    def test_batch_build_accepts_tuple(self):
        """Tuples are ordered sequences too."""
        assert make_tree(leaves=(1, 2, 3)).root == make_tree(leaves=[1, 2, 3]).root

    def test_batch_build_full_tree(self):
        """A tree can be built exactly at capacity."""
        tree = IncrementalMerkleTree(sha256_field_hash, 2, 0, 3, list(range(9)))

        assert tree.size == 9
        with pytest.raises(CapacityError):
            tree.insert(9)


class TestInsert:
    """Tests for insert()."""

    def test_insert_into_full_tree_raises(self):
        """Depth 1, arity 3 holds exactly three leaves."""
        full_tree = IncrementalMerkleTree(sha256_field_hash, 1, 0, 3)

        full_tree.insert(0)
        full_tree.insert(1)
        full_tree.insert(2)

        with pytest.raises(CapacityError, match="The tree is full"):
            full_tree.insert(4)

    def test_full_tree_unchanged_after_failed_insert(self):
        """A rejected insert leaves root and size alone."""
        full_tree = IncrementalMerkleTree(sha256_field_hash, 1, 0, 3, [0, 1, 2])
        root = full_tree.root

        with pytest.raises(CapacityError):
            full_tree.insert(4)

        assert full_tree.root == root
        assert full_tree.size == 3

    def test_insert_matches_reference(self, tree, reference):
        """After each insert the root equals the reference root."""
        for i in range(NUMBER_OF_LEAVES):
            tree.insert(1)
            reference.insert(1)

            assert tree.root == reference.gen_merkle_path(0).root
            assert len(tree.leaves) == i + 1

    def test_insert_distinct_values_matches_reference(self, tree, reference):
        """Distinct leaves land in distinct positions."""
        for leaf in range(1, 30):
            tree.insert(leaf * 7919)
            reference.insert(leaf * 7919)

        assert tree.root == reference.root
        assert tree.leaves == reference.leaves

    def test_insert_changes_root(self, tree):
        """Every insert moves the root."""
        roots = {tree.root}
        for i in range(NUMBER_OF_LEAVES):
            tree.insert(i + 1)
            roots.add(tree.root)

        assert len(roots) == NUMBER_OF_LEAVES + 1

    def test_insert_many(self, arity):
        """insert_many() equals repeated insert()."""
        leaves = list(range(1, 12))
        bulk = make_tree(arity=arity)
        one_by_one = make_tree(arity=arity)

        bulk.insert_many(leaves)
        for leaf in leaves:
            one_by_one.insert(leaf)

        assert bulk.root == one_by_one.root
        assert bulk.leaves == leaves

    def test_insert_many_over_capacity_inserts_nothing(self):
        """An oversized batch is rejected as a whole."""
        tree = IncrementalMerkleTree(sha256_field_hash, 1, 0, 3, [0])
        root = tree.root

        with pytest.raises(CapacityError):
            tree.insert_many([1, 2, 3])

        assert tree.size == 1
        assert tree.root == root

    def test_non_canonical_leaf_rejected(self, arity):
        """A leaf the hash rejects is not half-inserted."""
        tree, _ = make_filled_pair(arity=arity)
        root = tree.root

        with pytest.raises(ValueError):
            tree.insert(FIELD_MODULUS + 1)

        assert tree.size == NUMBER_OF_LEAVES
        assert tree.root == root
        tree.insert(1)
        assert tree.verify_proof(tree.create_proof(NUMBER_OF_LEAVES))


class TestDelete:
    """Tests for delete()."""

    def test_delete_missing_leaf_raises(self, tree):
        """Deleting from an empty tree fails."""
        with pytest.raises(NotFoundError, match="The leaf does not exist in this tree"):
            tree.delete(0)

    def test_delete_out_of_range_raises(self, tree):
        """Indices outside [0, size) are rejected."""
        tree.insert(1)

        with pytest.raises(NotFoundError):
            tree.delete(1)
        with pytest.raises(NotFoundError):
            tree.delete(-1)

    def test_delete_matches_reference(self, arity):
        """Deleting equals updating the reference to zero."""
        tree, reference = make_filled_pair(arity=arity)

        for i in range(NUMBER_OF_LEAVES):
            tree.delete(i)
            reference.update(i, 0)

            assert tree.root == reference.gen_merkle_path(0).root

    def test_delete_keeps_slot(self, arity):
        """Deletion zero-fills the slot instead of shrinking the tree."""
        tree, _ = make_filled_pair(arity=arity)

        tree.delete(3)

        assert tree.size == NUMBER_OF_LEAVES
        assert tree.leaves[3] == 0
        assert tree.index_of(0) == 3

    def test_delete_equals_update_to_zero(self, arity):
        """delete(i) and update(i, zero_value) give the same root."""
        deleted, _ = make_filled_pair(arity=arity)
        updated, _ = make_filled_pair(arity=arity)

        deleted.delete(4)
        updated.update(4, 0)

        assert deleted.root == updated.root

    def test_delete_all_is_not_empty_tree(self, arity):
        """A fully deleted tree keeps its size; its root is the all-zero root."""
        tree, _ = make_filled_pair(arity=arity)
        empty = make_tree(arity=arity)

        for i in range(NUMBER_OF_LEAVES):
            tree.delete(i)

        assert tree.size == NUMBER_OF_LEAVES
        # zero leaves hash exactly like absent ones
        assert tree.root == empty.root


class TestUpdate:
    """Tests for update()."""

    def test_update_matches_reference(self, arity):
        """Updating each leaf to zero tracks the reference."""
        tree, reference = make_filled_pair(arity=arity)

        for i in range(NUMBER_OF_LEAVES):
            tree.update(i, 0)
            reference.update(i, 0)

            assert tree.root == reference.gen_merkle_path(0).root

    def test_update_arbitrary_values_matches_reference(self, arity):
        """Mixed inserts, updates and deletes stay in agreement."""
        tree, reference = make_filled_pair(arity=arity, count=13)

        for i, value in [(0, 5), (12, 6), (7, 0), (3, 123456789), (12, 1)]:
            tree.update(i, value)
            reference.update(i, value)
            assert tree.root == reference.root

        tree.delete(5)
        reference.update(5, 0)
        tree.insert(42)
        reference.insert(42)

        assert tree.root == reference.root
        assert tree.leaves == reference.leaves

    def test_update_missing_leaf_raises(self, tree):
        """Updating past the last leaf fails."""
        tree.insert(1)

        with pytest.raises(NotFoundError):
            tree.update(1, 2)

    def test_update_non_int_index_raises(self, tree):
        """Non-integer indices are not found."""
        tree.insert(1)

        with pytest.raises(NotFoundError):
            tree.update("0", 2)
        with pytest.raises(NotFoundError):
            tree.update(True, 2)

    def test_failed_update_leaves_state(self, tree):
        """A rejected update changes nothing."""
        tree.insert(1)
        root = tree.root

        with pytest.raises(NotFoundError):
            tree.update(5, 2)

        assert tree.root == root
        assert tree.leaves == [1]

    def test_non_canonical_update_leaves_state(self, arity):
        """An update the hash rejects keeps the old leaf and root."""
        tree, reference = make_filled_pair(arity=arity)

        with pytest.raises(ValueError):
            tree.update(2, -1)

        assert tree.leaves == reference.leaves
        assert tree.root == reference.root

    def test_not_found_is_index_error(self, tree):
        """Callers catching IndexError still see missing leaves."""
        with pytest.raises(IndexError):
            tree.update(0, 1)

    def test_root_depends_only_on_leaves(self, arity):
        """Different histories ending in the same leaves share a root."""
        direct = make_tree(arity=arity, leaves=[4, 5, 6])

        roundabout = make_tree(arity=arity)
        roundabout.insert(9)
        roundabout.insert(9)
        roundabout.insert(6)
        roundabout.update(0, 4)
        roundabout.delete(1)
        roundabout.update(1, 5)

        assert roundabout.root == direct.root


class TestIndexOf:
    """Tests for index_of()."""

    def test_index_of_leaf(self, tree):
        """Returns the position of a leaf."""
        tree.insert(1)
        tree.insert(2)

        assert tree.index_of(2) == 1

    def test_index_of_missing_leaf(self, tree):
        """Absence is -1, not an exception."""
        tree.insert(1)

        assert tree.index_of(3) == -1

    def test_index_of_first_duplicate(self, tree):
        """Duplicates resolve to the lowest index."""
        for leaf in [7, 3, 7, 3]:
            tree.insert(leaf)

        assert tree.index_of(3) == 1
        assert tree.index_of(7) == 0


class TestRepr:
    """Tests for dunder helpers."""

    def test_repr(self, tree, arity):
        """repr shows parameters and size."""
        tree.insert(1)

        assert repr(tree) == f"IncrementalMerkleTree(depth={DEPTH}, arity={arity}, size=1)"
