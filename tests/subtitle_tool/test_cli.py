from subtitle_tool import cli
from subtitle_tool.provider import ProviderUnavailableError


class FakeProvider:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error

    def transcribe(self, audio_bytes, mime_type, prompt):
        if self.error is not None:
            raise self.error
        return self.text


def test_parse_args_defaults(tmp_path):
    args = cli.parse_args([str(tmp_path / "talk.wav")])
    assert args.output is None
    assert args.mime_type is None
    assert args.model == cli.GEMINI_MODEL


def test_main_writes_subtitle(tmp_path, capsys):
    audio = tmp_path / "talk.wav"
    audio.write_bytes(b"fake wav")
    models = []

    def factory(model):
        models.append(model)
        return FakeProvider("0-1.5: Hello\n1.5-3: World")

    exit_code = cli.main([str(audio), "--model", "gemini-test"], provider_factory=factory)

    assert exit_code == 0
    assert models == ["gemini-test"]
    subtitle = tmp_path / "talk.srt"
    assert subtitle.read_text(encoding="utf-8") == (
        "1\n00:00:00,000 --> 00:00:01,500\nHello\n"
        "\n"
        "2\n00:00:01,500 --> 00:00:03,000\nWorld\n"
    )
    assert f"Subtitle saved to {subtitle}" in capsys.readouterr().out


def test_main_custom_output_and_clamp(tmp_path):
    audio = tmp_path / "talk.ogg"
    audio.write_bytes(b"fake ogg")
    output = tmp_path / "out" / "captions.srt"
    output.parent.mkdir()

    exit_code = cli.main(
        [str(audio), "--output", str(output), "--mime-type", "audio/ogg", "--clamp-overlaps"],
        provider_factory=lambda model: FakeProvider("0-3: one\n2-4: two"),
    )

    assert exit_code == 0
    assert "00:00:00,000 --> 00:00:02,000" in output.read_text(encoding="utf-8")


def test_main_reports_missing_segments(tmp_path, capsys):
    audio = tmp_path / "talk.wav"
    audio.write_bytes(b"fake wav")

    exit_code = cli.main([str(audio)], provider_factory=lambda model: FakeProvider("5-3: broken segment"))

    assert exit_code == 1
    assert "Could not extract any timed segments" in capsys.readouterr().err
    assert not (tmp_path / "talk.srt").exists()


def test_main_reports_provider_failure(tmp_path, capsys):
    audio = tmp_path / "talk.wav"
    audio.write_bytes(b"fake wav")

    exit_code = cli.main(
        [str(audio)],
        provider_factory=lambda model: FakeProvider(error=ProviderUnavailableError("Could not reach Gemini")),
    )

    assert exit_code == 1
    assert "Error: Could not reach Gemini" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    exit_code = cli.main([str(tmp_path / "missing.wav")], provider_factory=lambda model: FakeProvider())

    assert exit_code == 1
    assert "Input file not found" in capsys.readouterr().err
