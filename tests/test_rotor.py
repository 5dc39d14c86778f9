import dataclasses
import unittest
from random import Random

from charset import CHARSET
from errors import InvalidCharacterError, PermutationError, PositionError, RotorConsistencyError
from rotor import (
    RotorDefinition,
    RotorState,
    create_active_rotor,
    forward_transform,
    inverse_transform,
)
from rotor_generator import (
    create_custom_rotor,
    create_identity_rotor,
    create_shift_rotor,
    generate_random_permutation,
)


def sample_rotors():
    rng = Random(1234)
    return [
        create_identity_rotor(),
        create_shift_rotor(),
        create_custom_rotor("Reversed", list(range(63, -1, -1))),
        create_custom_rotor("Random A", generate_random_permutation(rng)),
        create_custom_rotor("Random B", generate_random_permutation(rng)),
    ]


class RotorStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rotor = create_shift_rotor()

    def test_create_active_rotor(self) -> None:
        state = create_active_rotor(self.rotor, 10)
        self.assertIs(state.definition, self.rotor)
        self.assertEqual(state.position, 10)
        self.assertEqual(state.step_count, 0)
        self.assertEqual(state.offset, 9)

    def test_step_advances(self) -> None:
        state = create_active_rotor(self.rotor, 1)
        state = state.step()
        self.assertEqual((state.position, state.step_count), (2, 1))
        state = state.step()
        self.assertEqual((state.position, state.step_count), (3, 2))

    def test_step_wraps_64_to_1(self) -> None:
        state = create_active_rotor(self.rotor, 64).step()
        self.assertEqual(state.position, 1)
        self.assertEqual(state.step_count, 1)

    def test_step_is_pure(self) -> None:
        before = RotorState(self.rotor, 5, 7)
        after = before.step()
        self.assertEqual((before.position, before.step_count), (5, 7))
        self.assertEqual((after.position, after.step_count), (6, 8))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            before.position = 9  # type: ignore[misc]

    def test_full_revolution(self) -> None:
        state = create_active_rotor(self.rotor, 17)
        for _ in range(64):
            state = state.step()
        self.assertEqual(state.position, 17)
        self.assertEqual(state.step_count, 64)

    def test_rejects_bad_position(self) -> None:
        for bad in (0, 65, 2.0):
            with self.subTest(bad=bad):
                with self.assertRaises(PositionError):
                    RotorState(self.rotor, bad)


class TransformTests(unittest.TestCase):
    def test_identity_examples(self) -> None:
        identity = create_identity_rotor()
        self.assertEqual(forward_transform("A", identity, 1), "A")
        self.assertEqual(forward_transform("Z", identity, 1), "Z")
        self.assertEqual(forward_transform("a", identity, 1), "a")
        self.assertEqual(forward_transform("A", identity, 2), "A")
        self.assertEqual(forward_transform("B", identity, 2), "B")

    def test_shift_examples(self) -> None:
        shift = create_shift_rotor()
        self.assertEqual(forward_transform("A", shift, 1), "B")
        self.assertEqual(inverse_transform("B", shift, 1), "A")
        self.assertEqual(forward_transform(".", shift, 1), "A")
        self.assertEqual(forward_transform("A", shift, 40), "B")

    def test_position_changes_mapping(self) -> None:
        perm = list(range(64))
        perm[0], perm[1] = 1, 0
        rotor = create_custom_rotor("Swap", perm)
        self.assertEqual(forward_transform("A", rotor, 1), "B")
        # at offset 1 the swapped wires sit under "." and "A"
        self.assertEqual(forward_transform(".", rotor, 2), "A")
        self.assertEqual(forward_transform("A", rotor, 2), ".")
        self.assertEqual(forward_transform("B", rotor, 2), "B")

    def test_inverse_undoes_forward_everywhere(self) -> None:
        for rotor in sample_rotors():
            with self.subTest(rotor=rotor.name):
                for position in range(1, 65):
                    for c in CHARSET:
                        out = forward_transform(c, rotor, position)
                        self.assertEqual(inverse_transform(out, rotor, position), c, (position, c))

    def test_forward_is_a_bijection_at_each_position(self) -> None:
        rotor = sample_rotors()[3]
        for position in range(1, 65):
            state = RotorState(rotor, position)
            outputs = {state.encrypt_char(c) for c in CHARSET}
            self.assertEqual(outputs, set(CHARSET))

    def test_invalid_character(self) -> None:
        state = RotorState(create_identity_rotor(), 1)
        with self.assertRaises(InvalidCharacterError):
            state.encrypt_char("!")
        with self.assertRaises(InvalidCharacterError):
            state.decrypt_char("")

    def test_inverse_miss_is_internal_error(self) -> None:
        rotor = create_identity_rotor()
        object.__setattr__(rotor, "_inverse", tuple([-1] * 64))
        with self.assertRaises(RotorConsistencyError):
            RotorState(rotor, 1).decrypt_char("A")


class RotorDefinitionTests(unittest.TestCase):
    def test_inverse_table(self) -> None:
        rotor = sample_rotors()[4]
        for i, value in enumerate(rotor.permutation):
            self.assertEqual(rotor.inverse[value], i)

    def test_revise_keeps_id(self) -> None:
        rotor = create_identity_rotor("Original")
        edited = rotor.revise(name="  Renamed  ", description="new", permutation=[(i + 3) % 64 for i in range(64)])
        self.assertEqual(edited.id, rotor.id)
        self.assertEqual(edited.name, "Renamed")
        self.assertEqual(edited.description, "new")
        self.assertEqual(edited.created_at, rotor.created_at)
        self.assertGreaterEqual(edited.updated_at, rotor.updated_at)
        self.assertEqual(edited.permutation[0], 3)
        self.assertEqual(edited.inverse[3], 0)
        # original untouched
        self.assertEqual(rotor.name, "Original")
        self.assertEqual(rotor.permutation[0], 0)

    def test_revise_description(self) -> None:
        rotor = create_identity_rotor()
        self.assertIsNotNone(rotor.description)
        self.assertEqual(rotor.revise(name="Kept").description, rotor.description)
        self.assertEqual(rotor.revise(description="  trimmed ").description, "trimmed")
        self.assertIsNone(rotor.revise(description=None).description)

    def test_revise_validates(self) -> None:
        rotor = create_identity_rotor()
        with self.assertRaises(PermutationError):
            rotor.revise(permutation=[0] * 64)

    def test_frozen(self) -> None:
        rotor = create_identity_rotor()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            rotor.name = "x"  # type: ignore[misc]
        self.assertIsInstance(rotor, RotorDefinition)


if __name__ == "__main__":
    unittest.main()
