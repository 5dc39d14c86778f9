import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from random import Random
from tempfile import TemporaryDirectory

import main
from codec import EncryptionConfiguration
from rotor_generator import emit_json, generate_multiple_rotors, rotor_to_dict


class MainCliTests(unittest.TestCase):
    """CLI smokes: rotor file loading, config file, one-shot encrypt/decrypt."""

    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.tmp_path = Path(self.tmpdir.name)
        self.rotors = generate_multiple_rotors(3, rng=Random(17))
        self.rotor_file = self.tmp_path / "rotors.json"
        self.rotor_file.write_text(emit_json(self.rotors), encoding="utf-8")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _run(self, *args: str):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main.main(list(args))
        return code, out.getvalue(), err.getvalue()

    def test_rotor_dict_round_trip(self) -> None:
        rotor = self.rotors[0]
        self.assertEqual(main.rotor_from_dict(rotor_to_dict(rotor)), rotor)

    def test_load_rotor_file(self) -> None:
        loaded = main.load_rotor_file(self.rotor_file)
        self.assertEqual(list(loaded), [r.id for r in self.rotors])

    def test_load_rotor_file_rejects_other_json(self) -> None:
        bad = self.tmp_path / "bad.json"
        bad.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(ValueError):
            main.load_rotor_file(bad)

    def test_load_config_requires_keys(self) -> None:
        cfg = self.tmp_path / "session.json"
        cfg.write_text(json.dumps({"rotors": []}), encoding="utf-8")
        with self.assertRaises(ValueError) as ctx:
            main.load_config(cfg)
        self.assertIn("positions", str(ctx.exception))
        self.assertIn("rotor_file", str(ctx.exception))

    def test_load_rotor_file_rejects_duplicate_ids(self) -> None:
        dup = self.tmp_path / "dup.json"
        dup.write_text(emit_json([self.rotors[0], self.rotors[1], self.rotors[0]]), encoding="utf-8")
        with self.assertRaises(ValueError) as ctx:
            main.load_rotor_file(dup)
        self.assertIn("more than once", str(ctx.exception))

        code, _, err = self._run("--rotor-file", str(dup), "--rotors", "Rotor 1", "-m", "Hi")
        self.assertEqual(code, 1)
        self.assertIn("more than once", err)

    def test_malformed_rotor_entries(self) -> None:
        bad_perm = rotor_to_dict(self.rotors[0])
        bad_perm["permutation"] = 5
        cases = {
            "not_object.json": {"rotors": ["oops"]},
            "bad_perm.json": {"rotors": [bad_perm]},
            "no_list.json": {"rotors": 3},
        }
        for name, payload in cases.items():
            with self.subTest(name):
                path = self.tmp_path / name
                path.write_text(json.dumps(payload), encoding="utf-8")
                with self.assertRaises(ValueError):
                    main.load_rotor_file(path)
                code, _, err = self._run("--rotor-file", str(path), "--rotors", "Rotor 1", "-m", "Hi")
                self.assertEqual(code, 1)
                self.assertIn("Failed to load configuration", err)

    def test_rotor_from_dict_rejects_bad_timestamp(self) -> None:
        data = rotor_to_dict(self.rotors[0])
        data["createdAt"] = 12345
        with self.assertRaises(ValueError):
            main.rotor_from_dict(data)

    def test_malformed_config_file(self) -> None:
        cases = {
            "list.json": [1],
            "bad_path.json": {"rotor_file": 7, "rotors": [], "positions": []},
            "bad_rotors.json": {"rotor_file": str(self.rotor_file), "rotors": "Rotor 1", "positions": [1]},
            "bad_positions.json": {"rotor_file": str(self.rotor_file), "rotors": ["Rotor 1"], "positions": 1},
        }
        for name, payload in cases.items():
            with self.subTest(name):
                path = self.tmp_path / name
                path.write_text(json.dumps(payload), encoding="utf-8")
                with self.assertRaises(ValueError):
                    main.load_config(path)
                code, _, err = self._run("--config", str(path), "-m", "x")
                self.assertEqual(code, 1)
                self.assertIn("Failed to load configuration", err)

    def test_resolve_by_name_or_id(self) -> None:
        lookup = {r.id: r for r in self.rotors}
        refs = ["Rotor 2", self.rotors[0].id, "ghost"]
        self.assertEqual(
            main.resolve_rotor_refs(refs, lookup),
            [self.rotors[1].id, self.rotors[0].id, "ghost"],
        )

    def test_encrypt_then_decrypt(self) -> None:
        base = ["--rotor-file", str(self.rotor_file), "--rotors", "Rotor 1", "Rotor 3", "--positions", "1", "32", "--quiet"]
        code, out, _ = self._run(*base, "-m", "Hello World.")
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("Encrypted: "))
        cipher = out[len("Encrypted: "):-1]
        self.assertEqual(len(cipher), 12)

        code, out, _ = self._run(*base, "--decrypt", "-m", cipher)
        self.assertEqual(code, 0)
        self.assertEqual(out, "Decrypted: Hello World.\n")

    def test_reports_state(self) -> None:
        code, out, _ = self._run(
            "--rotor-file", str(self.rotor_file), "--rotors", "Rotor 1", "-m", "Hi!"
        )
        self.assertEqual(code, 0)
        self.assertIn("final positions : [3]", out)
        self.assertIn("Skipped invalid character: '!'", out)

    def test_config_file(self) -> None:
        cfg = self.tmp_path / "session.json"
        cfg.write_text(
            json.dumps({"rotor_file": str(self.rotor_file), "rotors": ["Rotor 2"], "positions": [9]}),
            encoding="utf-8",
        )
        code, out, _ = self._run("--config", str(cfg), "--quiet", "-m", "abc")
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("Encrypted: "))

    def test_strict_rejects_text(self) -> None:
        code, _, err = self._run(
            "--rotor-file", str(self.rotor_file), "--rotors", "Rotor 1", "--strict", "-m", "Hi!"
        )
        self.assertEqual(code, 1)
        self.assertIn("'!'", err)

    def test_unknown_rotor(self) -> None:
        code, _, err = self._run("--rotor-file", str(self.rotor_file), "--rotors", "ghost", "-m", "Hi")
        self.assertEqual(code, 1)
        self.assertIn("not found", err)

    def test_missing_arguments(self) -> None:
        code, _, err = self._run("-m", "Hi")
        self.assertEqual(code, 1)
        self.assertIn("--rotor-file", err)

    def test_bad_configuration(self) -> None:
        code, _, err = self._run(
            "--rotor-file", str(self.rotor_file), "--rotors", "Rotor 1", "Rotor 1", "--positions", "1", "2", "-m", "Hi"
        )
        self.assertEqual(code, 1)
        self.assertIn("same rotor", err)

    def test_session_validates(self) -> None:
        lookup = {r.id: r for r in self.rotors}
        with self.assertRaises(ValueError):
            main.Session(lookup, EncryptionConfiguration((), ()), main.Config())


if __name__ == "__main__":
    unittest.main()
