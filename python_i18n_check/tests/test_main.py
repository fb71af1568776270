"""
Tests for the command-line entry point and the final run outcome.
"""
import logging
import textwrap

import polib
import pytest

from python_i18n_check import main as main_module
from python_i18n_check.errors import FailError, LocaleFileError, TaskListError, UntrackedMessagesError
from python_i18n_check.main import main, report_run_outcome
from python_i18n_check.services.error_reporter import ErrorReporter

PYPROJECT = '''
[project]
name = "demo"

[tool.i18n-check]
translations = ["locale/fr.po"]
scan_roots = ["src"]

[tool.i18n-check.paths]
messages = ["src/app"]
'''

VIEWS = '''
from gettext import gettext as _


def greet(name):
    return _("Hello %(name)s") % {"name": name}


def leave():
    return _("Goodbye")
'''


class RaisingOrchestrator:
    """Stands in for the orchestrator and raises a given error from run()."""

    def __init__(self, error=None):
        self.error = error

    def run(self):
        if self.error is not None:
            raise self.error


@pytest.fixture(autouse=True)
def fixture_quiet_logging(monkeypatch):
    # basicConfig(force=True) would remove the handler caplog relies on
    monkeypatch.setattr(main_module, "setup_logging", lambda **kwargs: None)


@pytest.fixture(name='project')
def fixture_project(tmp_path, monkeypatch):
    """A project whose French translation file matches its sources."""
    (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    views = tmp_path / "src" / "app" / "views.py"
    views.parent.mkdir(parents=True)
    views.write_text(textwrap.dedent(VIEWS), encoding="utf-8")

    po = polib.POFile()
    po.metadata = {'Language': 'fr', 'Content-Type': 'text/plain; charset=UTF-8'}
    po.append(polib.POEntry(msgid="Hello %(name)s", msgstr="Bonjour %(name)s"))
    po.append(polib.POEntry(msgid="Goodbye", msgstr="Au revoir"))
    (tmp_path / "locale").mkdir()
    po.save(str(tmp_path / "locale" / "fr.po"))

    monkeypatch.chdir(tmp_path)
    return tmp_path


def run_main(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def add_entry(po_path, msgid, msgstr):
    po = polib.pofile(str(po_path))
    po.append(polib.POEntry(msgid=msgid, msgstr=msgstr))
    po.save(str(po_path))


def test_outcome_success():
    assert report_run_outcome(RaisingOrchestrator(), ErrorReporter()) == 0


def test_outcome_with_reported_errors_is_one_message():
    reporter = ErrorReporter()
    reporter.report("first", path="src/a.py")
    reporter.report("second", path="src/b.py")

    with pytest.raises(FailError) as excinfo:
        report_run_outcome(RaisingOrchestrator(TaskListError([UntrackedMessagesError("2 files")])), reporter)

    assert str(excinfo.value) == "src/a.py: first\n\nsrc/b.py: second"


def test_outcome_keeps_errors_the_reporter_does_not_hold():
    reporter = ErrorReporter()
    reporter.report("not covered", path="b/stray.py")
    errors = [RuntimeError("scan root a could not be walked"), UntrackedMessagesError("1 file")]

    with pytest.raises(FailError) as excinfo:
        report_run_outcome(RaisingOrchestrator(TaskListError(errors)), reporter)

    assert str(excinfo.value) == "b/stray.py: not covered\n\nscan root a could not be walked"


def test_outcome_without_reported_errors_logs_each_error(caplog):
    errors = [LocaleFileError("fr.po is not compatible"), LocaleFileError("de.po is not compatible")]

    with caplog.at_level(logging.ERROR):
        exit_code = report_run_outcome(RaisingOrchestrator(TaskListError(errors)), ErrorReporter())

    assert exit_code == 1
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["fr.po is not compatible", "de.po is not compatible"]


def test_outcome_fail_error_is_passed_on():
    with pytest.raises(FailError, match="timed out"):
        report_run_outcome(RaisingOrchestrator(FailError("timed out")), ErrorReporter())


def test_outcome_unhandled_error_exits(caplog):
    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as excinfo:
        report_run_outcome(RaisingOrchestrator(RuntimeError("boom")), ErrorReporter())

    assert excinfo.value.code == 1
    assert "Unhandled exception!" in caplog.text
    assert "RuntimeError: boom" in caplog.text


@pytest.mark.parametrize("argv,expected", [
    (["--fix", "--ignore-missing"], "is allowed when --fix is set"),
    (["--path"], "--path and --include-config require a value"),
    (["--fix=yes"], "--fix can't have a value"),
])
def test_invalid_flags_exit_before_any_work(argv, expected, caplog, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with caplog.at_level(logging.ERROR):
        assert run_main(argv) == 1
    assert expected in caplog.text
    assert "[I18N ERROR]" in caplog.text


def test_nothing_configured_exits_cleanly(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert run_main([]) == 0


def test_missing_include_config_exits_with_error(tmp_path, monkeypatch, caplog):
    monkeypatch.chdir(tmp_path)
    with caplog.at_level(logging.ERROR):
        assert run_main(["--include-config", "missing.toml"]) == 1
    assert "does not exist" in caplog.text


def test_matching_project_passes(project):
    assert run_main([]) == 0


def test_unused_translation_fails(project, caplog):
    add_entry(project / "locale" / "fr.po", "Old text", "Vieux texte")

    with caplog.at_level(logging.ERROR):
        assert run_main([]) == 1

    assert "Unused translations" in caplog.text
    assert '"Old text"' in caplog.text


def test_ignored_category_passes(project):
    add_entry(project / "locale" / "fr.po", "Old text", "Vieux texte")
    assert run_main(["--ignore-unused"]) == 0


def test_fix_rewrites_the_translation_file(project):
    po_path = project / "locale" / "fr.po"
    add_entry(po_path, "Old text", "Vieux texte")
    (project / "src" / "app" / "extra.py").write_text('from gettext import gettext as _\n_("Later")\n')

    assert run_main(["--fix"]) == 0

    po = polib.pofile(str(po_path))
    assert po.find("Old text") is None
    assert po.find("Later").msgstr == ""
    assert po.find("Hello %(name)s").msgstr == "Bonjour %(name)s"
    assert run_main([]) == 0


def test_untracked_messages_fail_with_one_message(project, caplog):
    stray = project / "src" / "other" / "stray.py"
    stray.parent.mkdir()
    stray.write_text('from gettext import gettext as _\nTITLE = _("Stray")\n')

    with caplog.at_level(logging.ERROR):
        assert run_main([]) == 1

    assert "not covered by any configured message path" in caplog.text
    assert "stray.py" in caplog.text


def test_untracked_messages_can_be_ignored(project):
    stray = project / "src" / "other" / "stray.py"
    stray.parent.mkdir()
    stray.write_text('from gettext import gettext as _\nTITLE = _("Stray")\n')

    assert run_main(["--ignore-untracked"]) == 0


def test_unreadable_file_in_one_root_is_not_hidden_by_another(project, caplog):
    pyproject = project / "pyproject.toml"
    pyproject.write_text(PYPROJECT.replace('scan_roots = ["src"]', 'scan_roots = ["a", "b"]'), encoding="utf-8")
    (project / "a").mkdir()
    (project / "a" / "latin.py").write_bytes(b'from gettext import gettext as _\nNAME = _("caf\xe9")\n')
    (project / "b").mkdir()
    (project / "b" / "stray.py").write_text('from gettext import gettext as _\nTITLE = _("Stray")\n')

    with caplog.at_level(logging.ERROR):
        assert run_main([]) == 1

    assert "latin.py" in caplog.text
    assert "stray.py" in caplog.text


def test_each_domain_file_is_checked_against_its_own_messages(project):
    (project / "pyproject.toml").write_text('''
[tool.i18n-check]
translations = ["locale/messages.po", "locale/admin.po"]
scan_roots = ["src"]

[tool.i18n-check.paths]
messages = ["src/app"]
admin = ["src/admin"]
''', encoding="utf-8")
    admin = project / "src" / "admin" / "views.py"
    admin.parent.mkdir()
    admin.write_text('from gettext import gettext as _\nTITLE = _("Dashboard")\n')

    (project / "locale" / "fr.po").rename(project / "locale" / "messages.po")
    po = polib.POFile()
    po.metadata = {'Language': 'fr', 'Content-Type': 'text/plain; charset=UTF-8'}
    po.append(polib.POEntry(msgid="Dashboard", msgstr="Tableau de bord"))
    po.save(str(project / "locale" / "admin.po"))

    assert run_main([]) == 0

    assert run_main(["--fix"]) == 0
    assert polib.pofile(str(project / "locale" / "admin.po")).find("Hello %(name)s") is None
