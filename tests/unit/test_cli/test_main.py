"""Unit tests for the songrank CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from songrank.cli.main import cli


def write_songs(path: Path, songs: list[dict]) -> Path:
    path.write_text(json.dumps(songs), encoding="utf-8")
    return path


@pytest.fixture
def runner() -> CliRunner:
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def three_songs(tmp_path: Path) -> Path:
    """A small song list."""
    return write_songs(
        tmp_path / "songs.json",
        [
            {"id": "s1", "title": "First", "artist": "Band"},
            {"id": "s2", "title": "Second", "artist": "Band"},
            {"id": "s3", "title": "Third", "artist": "Band"},
        ],
    )


class TestRankCommand:
    """Tests for the rank command."""

    def test_rank_to_completion(
        self, runner: CliRunner, three_songs: Path, tmp_path: Path
    ) -> None:
        """Answers drive the session to a finished ranking."""
        out = tmp_path / "ranking.json"
        result = runner.invoke(
            cli,
            ["rank", str(three_songs), "--out", str(out)],
            input="b\nw\nb\n",
        )

        assert result.exit_code == 0, result.output
        assert "Ranking complete after 3 comparisons:" in result.output

        rows = json.loads(out.read_text(encoding="utf-8"))
        assert [row["musicbrainz_id"] for row in rows] == ["s1", "s3", "s2"]
        assert [row["rank"] for row in rows] == [1, 2, 3]

    def test_unknown_answer_drops_song(
        self, runner: CliRunner, three_songs: Path, tmp_path: Path
    ) -> None:
        """An unknown answer removes the song from the ranking."""
        out = tmp_path / "ranking.json"
        result = runner.invoke(
            cli,
            ["rank", str(three_songs), "--out", str(out)],
            input="u\nb\n",
        )

        assert result.exit_code == 0, result.output
        rows = json.loads(out.read_text(encoding="utf-8"))
        assert [row["musicbrainz_id"] for row in rows] == ["s2", "s3"]

    def test_extend_existing(self, runner: CliRunner, tmp_path: Path) -> None:
        """Songs already in the existing ranking are not asked about."""
        existing = write_songs(
            tmp_path / "existing.json",
            [
                {"musicbrainz_id": "e2", "title": "Old B", "artist": "Band", "rank": 2},
                {
                    "musicbrainz_id": "e1",
                    "title": "Old A",
                    "artist": "Band",
                    "rank": 1,
                    "album_musicbrainz_id": "alb-1",
                },
            ],
        )
        songs = write_songs(
            tmp_path / "new.json",
            [
                {"id": "other", "title": "old a", "artist": "band"},
                {"id": "n1", "title": "New", "artist": "Band"},
            ],
        )
        out = tmp_path / "ranking.json"
        result = runner.invoke(
            cli,
            ["rank", str(songs), "--existing", str(existing), "--out", str(out)],
            input="w\nw\n",
        )

        assert result.exit_code == 0, result.output
        rows = json.loads(out.read_text(encoding="utf-8"))
        assert [row["musicbrainz_id"] for row in rows] == ["e1", "e2", "n1"]
        assert rows[0]["album_musicbrainz_id"] == "alb-1"

    def test_save_and_resume(
        self, runner: CliRunner, three_songs: Path, tmp_path: Path
    ) -> None:
        """A saved draft resumes at the same question."""
        draft = tmp_path / "draft.json"
        result = runner.invoke(
            cli,
            ["rank", str(three_songs), "--save-draft", str(draft)],
            input="b\ns\n",
        )

        assert result.exit_code == 0, result.output
        assert "Draft saved to" in result.output
        saved = json.loads(draft.read_text(encoding="utf-8"))
        assert saved["state"]["comparisonCount"] == 1
        assert saved["state"]["pendingComparison"]["newItem"]["id"] == "s3"
        assert len(saved["songs"]) == 3

        out = tmp_path / "ranking.json"
        result = runner.invoke(
            cli,
            ["resume", str(draft), "--out", str(out)],
            input="w\nb\n",
        )

        assert result.exit_code == 0, result.output
        assert "Ranking complete after 3 comparisons:" in result.output
        rows = json.loads(out.read_text(encoding="utf-8"))
        assert [row["musicbrainz_id"] for row in rows] == ["s1", "s3", "s2"]

    def test_save_without_path_fails(self, runner: CliRunner, three_songs: Path) -> None:
        """Saving needs somewhere to write."""
        result = runner.invoke(cli, ["rank", str(three_songs)], input="s\n")
        assert result.exit_code == 1

    def test_invalid_song_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Invalid songs are reported with hints."""
        songs = write_songs(tmp_path / "bad.json", [{"id": "x", "title": "No Artist"}])
        result = runner.invoke(cli, ["rank", str(songs)])

        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "Hint:" in result.output


class TestResumeCommand:
    """Tests for the resume command."""

    def test_bare_snapshot(self, runner: CliRunner, tmp_path: Path) -> None:
        """A bare engine snapshot is accepted as a draft."""
        song = {"id": "p", "title": "P", "artist": "A"}
        draft = tmp_path / "snapshot.json"
        draft.write_text(
            json.dumps(
                {
                    "ranked": [song],
                    "remaining": [{"id": "r", "title": "R", "artist": "A"}],
                    "pendingComparison": None,
                    "comparisonCount": 0,
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["resume", str(draft)], input="b\n")

        assert result.exit_code == 0, result.output
        assert "Ranking complete after 1 comparisons:" in result.output

    def test_inconsistent_snapshot(self, runner: CliRunner, tmp_path: Path) -> None:
        """A snapshot whose pending comparison does not fit is rejected."""
        p = {"id": "p", "title": "P", "artist": "A"}
        r = {"id": "r", "title": "R", "artist": "A"}
        draft = tmp_path / "snapshot.json"
        draft.write_text(
            json.dumps(
                {
                    "ranked": [p],
                    "remaining": [r],
                    "pendingComparison": {
                        "newItem": r,
                        "probeItem": p,
                        "probePosition": 3,
                        "lowBound": 0,
                        "highBound": 3,
                    },
                    "comparisonCount": 0,
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["resume", str(draft)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_malformed_draft(self, runner: CliRunner, tmp_path: Path) -> None:
        """Schema errors are reported with hints."""
        draft = tmp_path / "draft.json"
        draft.write_text(json.dumps({"comparisonCount": -1}), encoding="utf-8")
        result = runner.invoke(cli, ["resume", str(draft)])

        assert result.exit_code == 1
        assert "Invalid draft" in result.output


class TestDiffCommand:
    """Tests for the diff command."""

    @pytest.fixture
    def rankings(self, tmp_path: Path) -> tuple[Path, Path]:
        x = {"id": "x", "title": "X", "artist": "A"}
        y = {"id": "y", "title": "Y", "artist": "A"}
        z = {"id": "z", "title": "Z", "artist": "A"}
        w = {"id": "w", "title": "W", "artist": "A"}
        return (
            write_songs(tmp_path / "yours.json", [x, y, z]),
            write_songs(tmp_path / "theirs.json", [y, x, w]),
        )

    def test_text_output(self, runner: CliRunner, rankings: tuple[Path, Path]) -> None:
        """The table lists similarity and unshared songs."""
        yours, theirs = rankings
        result = runner.invoke(cli, ["diff", str(yours), str(theirs)])

        assert result.exit_code == 0, result.output
        assert "Similarity: 67%" in result.output
        assert "Only in yours:" in result.output
        assert "Z - A" in result.output
        assert "Only in theirs:" in result.output

    def test_json_output(self, runner: CliRunner, rankings: tuple[Path, Path]) -> None:
        """--json prints the diff result."""
        yours, theirs = rankings
        result = runner.invoke(cli, ["diff", str(yours), str(theirs), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["similarity"] == 67
        assert [s["direction"] for s in data["sharedItems"]] == ["down", "up"]


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_file(self, runner: CliRunner, three_songs: Path) -> None:
        """A valid file reports its song count."""
        result = runner.invoke(cli, ["validate", str(three_songs)])
        assert result.exit_code == 0
        assert "3 songs are valid." in result.output

    def test_yaml_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """YAML song lists are accepted."""
        path = tmp_path / "songs.yaml"
        path.write_text(
            "songs:\n  - title: One\n    artist: Band\n  - title: Two\n    artist: Band\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 0
        assert "2 songs are valid." in result.output

    def test_wrong_shape(self, runner: CliRunner, tmp_path: Path) -> None:
        """A scalar document is not a song list."""
        path = tmp_path / "songs.yaml"
        path.write_text("just a string\n", encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "list of songs" in result.output
