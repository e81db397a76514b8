"""End-to-end tests for the zsnapfree command line against a stand-in zfs."""

import pytest

from zsnapfree import cli
from zsnapfree.services.recompute_loop import Action

LISTING = "tank/fs@snap1\t1K\ntank/fs@snap2\t1K\ntank/fs@snap3\t1K\ntank/fs@snap4\t1K\n"


def scripted_ui(*actions):
    """A UI stand-in that feeds actions straight into the loop."""

    class Events:
        def __init__(self):
            self.script = list(actions)

        def poll(self, timeout):
            return self.script.pop(0) if self.script else Action.EXIT

    def _ui(loop):
        loop.run(Events())

    return _ui


class TestCli:
    """Test suite for the command-line entry point."""

    def test_summary_after_session(self, fake_zfs, capsys):
        """Test that exiting prints the dry-run summary for the last selection."""
        fake_zfs.configure(
            list_output=LISTING,
            destroy_output="destroy\ttank/fs@snap1\ndestroy\ttank/fs@snap2\nreclaim\t2048\n",
        )

        result = cli.main(
            ["--zfs", str(fake_zfs.path), "tank/fs"],
            ui=scripted_ui(Action.TOGGLE, Action.TOGGLE),
        )

        assert result == 0
        out = capsys.readouterr().out
        assert "pretend to delete 2 snapshots" in out
        assert "reclaim 2 KiB" in out
        assert "zfs destroy -nv tank/fs@snap1%snap2" in out
        assert "without `-n`" in out
        assert fake_zfs.calls == ["list -Ht snapshot tank/fs", "destroy -np tank/fs@snap1%snap2"]

    def test_idle_recompute_then_final_recompute(self, fake_zfs, capsys):
        """Test that the final recompute runs even when the estimate is already current."""
        fake_zfs.configure(
            list_output=LISTING,
            destroy_output="destroy\ttank/fs@snap1\nreclaim\t10\n",
        )

        cli.main(["--zfs", str(fake_zfs.path), "tank/fs"], ui=scripted_ui(Action.TOGGLE, None))

        assert fake_zfs.calls == [
            "list -Ht snapshot tank/fs",
            "destroy -np tank/fs@snap1",
            "destroy -np tank/fs@snap1",
        ]

    def test_nothing_marked(self, fake_zfs, capsys):
        """Test that an empty selection never dry-runs a destroy."""
        fake_zfs.configure(list_output=LISTING)

        result = cli.main(["--zfs", str(fake_zfs.path), "tank/fs"], ui=scripted_ui())

        assert result == 0
        assert "No snapshots were marked" in capsys.readouterr().out
        assert fake_zfs.calls == ["list -Ht snapshot tank/fs"]

    def test_zfs_from_environment(self, fake_zfs, monkeypatch, capsys):
        """Test that ZSNAPFREE_ZFS selects the zfs binary."""
        fake_zfs.configure(list_output=LISTING)
        monkeypatch.setenv("ZSNAPFREE_ZFS", str(fake_zfs.path))

        assert cli.main(["tank/fs"], ui=scripted_ui()) == 0
        assert fake_zfs.calls == ["list -Ht snapshot tank/fs"]

    def test_listing_failure(self, fake_zfs, capsys):
        """Test that a failed listing is reported and exits non-zero."""
        fake_zfs.configure(stderr="cannot open 'tank/nope': dataset does not exist\n", exit_code=1)

        result = cli.main(["--zfs", str(fake_zfs.path), "tank/nope"], ui=scripted_ui())

        assert result == 1
        err = capsys.readouterr().err
        assert "Failed to fetch snapshots for tank/nope" in err
        assert "dataset does not exist" in err

    def test_wrong_dataset_in_listing(self, fake_zfs, capsys):
        """Test that a listing for another dataset aborts the session."""
        fake_zfs.configure(list_output=LISTING)

        result = cli.main(["--zfs", str(fake_zfs.path), "tank/other"], ui=scripted_ui())

        assert result == 1
        assert "expected tank/other@" in capsys.readouterr().err

    def test_incomplete_dry_run_output(self, fake_zfs, capsys):
        """Test that a dry run without a reclaim line ends the session with an error."""
        fake_zfs.configure(list_output=LISTING, destroy_output="destroy\ttank/fs@snap1\n")

        result = cli.main(
            ["--zfs", str(fake_zfs.path), "tank/fs"], ui=scripted_ui(Action.TOGGLE, None)
        )

        assert result == 1
        assert "missing 'reclaim' line" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "output,expected",
        [
            ({"list_output": b"tank/fs@snap\xff1\t1K\n"}, "Unexpected zfs output"),
            ({"stderr": b"cannot open \xff\n", "exit_code": 1}, "cannot open \ufffd"),
        ],
    )
    def test_output_that_is_not_utf8(self, fake_zfs, capsys, output, expected):
        """Test that undecodable zfs output ends the session with an error, not a traceback."""
        fake_zfs.configure(**output)

        result = cli.main(["--zfs", str(fake_zfs.path), "tank/fs"], ui=scripted_ui())

        assert result == 1
        assert expected in capsys.readouterr().err

    def test_missing_zfs_binary(self, tmp_path, capsys):
        """Test that an unusable zfs binary is caught before the UI starts."""
        result = cli.main(["--zfs", str(tmp_path / "nope"), "tank/fs"], ui=scripted_ui())

        assert result == 1
        assert "zfs binary not found" in capsys.readouterr().err

    def test_invalid_option_value(self, fake_zfs, capsys):
        """Test that invalid settings are reported rather than raised."""
        result = cli.main(
            ["--zfs", str(fake_zfs.path), "--idle-timeout-ms", "0", "tank/fs"],
            ui=scripted_ui(),
        )

        assert result == 1
        assert "idle_timeout_ms" in capsys.readouterr().err

    def test_help_exits_zero(self):
        """Test that --help exits cleanly."""
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--help"])
        assert excinfo.value.code == 0
