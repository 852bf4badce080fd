"""
Unit tests for the command-line front end.
"""
import io
from unittest.mock import AsyncMock, MagicMock

import pytest

import translate
from polyglot.core.llm.exceptions import RemoteRejectedError, UnauthenticatedError
from polyglot.core.pipeline import RequestPipeline


def parse(*argv):
    return translate.build_parser().parse_args(list(argv))


@pytest.fixture
def pipeline():
    pipeline = MagicMock()
    pipeline.translate = AsyncMock(return_value="Hello")
    pipeline.detect_language = AsyncMock(return_value="German")
    return pipeline


@pytest.fixture
def history():
    return MagicMock()


class TestArguments:

    def test_defaults(self):
        args = parse("Hallo")
        assert args.text == "Hallo"
        assert args.source_lang == "auto"
        assert args.target_lang == "en"
        assert args.detect is False
        assert args.live is False

    def test_short_options(self):
        args = parse("-sl", "de", "-tl", "ja", "--detect", "Hallo")
        assert args.source_lang == "de"
        assert args.target_lang == "ja"
        assert args.detect is True


class TestRunOnce:

    @pytest.mark.asyncio
    async def test_translate(self, pipeline, history, api_key, capsys):
        args = parse("-sl", "de", "-tl", "en", "  Hallo ")

        assert await translate.run_once(args, pipeline, api_key, history) == 0

        request, credential = pipeline.translate.await_args.args
        assert request.source_text == "Hallo"
        assert request.source_language == "de"
        assert credential == api_key
        assert capsys.readouterr().out == "Hello\n"
        history.add.assert_called_once_with("Hallo", "Hello", "de", "en")

    @pytest.mark.asyncio
    async def test_no_history(self, pipeline, history, api_key):
        args = parse("--no-history", "Hallo")
        await translate.run_once(args, pipeline, api_key, history)
        history.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_input_file(self, pipeline, history, api_key, tmp_path):
        source = tmp_path / "input.txt"
        source.write_text("Guten Morgen\n", encoding="utf-8")
        args = parse("-i", str(source))

        await translate.run_once(args, pipeline, api_key, history)

        request, _ = pipeline.translate.await_args.args
        assert request.source_text == "Guten Morgen"

    @pytest.mark.asyncio
    async def test_detect(self, pipeline, history, api_key, capsys):
        args = parse("--detect", "Hallo")

        assert await translate.run_once(args, pipeline, api_key, history) == 0

        pipeline.detect_language.assert_awaited_once_with("Hallo", api_key)
        pipeline.translate.assert_not_awaited()
        assert capsys.readouterr().out == "German\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        UnauthenticatedError("API key not set or invalid"),
        RemoteRejectedError("Rate limit reached", status_code=429),
    ])
    async def test_failure_exit_code(self, pipeline, history, api_key, error):
        pipeline.translate = AsyncMock(side_effect=error)

        assert await translate.run_once(parse("Hallo"), pipeline, api_key, history) == 1
        history.add.assert_not_called()


class TestRunLive:

    @pytest.mark.asyncio
    async def test_live_session(self, scripted_provider, history, api_key, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("Hallo\n:now\n:quit\n"))
        provider = scripted_provider("Hello")
        credentials = MagicMock()
        credentials.get_api_key.return_value = api_key
        args = parse("--live", "-sl", "de", "-tl", "en")

        code = await translate.run_live(args, RequestPipeline(provider), credentials, history)

        assert code == 0
        assert len(provider.calls) == 1
        assert "[en] Hello" in capsys.readouterr().out
        history.attach.assert_called_once()

    @pytest.mark.asyncio
    async def test_swap_refusal_is_printed(self, scripted_provider, history, api_key,
                                           monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(":swap\n"))
        credentials = MagicMock()
        credentials.get_api_key.return_value = api_key
        args = parse("--live")

        await translate.run_live(args, RequestPipeline(scripted_provider()), credentials, history)

        assert "! Cannot swap when auto-detect is enabled" in capsys.readouterr().out
