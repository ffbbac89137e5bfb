"""Tests for the click CLI."""

import json

import click
import pytest
from click.testing import CliRunner

from pughtodo import cli
from pughtodo.config import Config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    monkeypatch.setattr(cli, "load_config", lambda: Config())


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path):
    db = tmp_path / "todo.db"

    def _invoke(*args, input=None):
        return runner.invoke(cli.main, ["--db", str(db), *args], input=input)

    return _invoke


@pytest.fixture
def work(invoke):
    result = invoke("categories", "add", "Work", "--weight", "2")
    assert result.exit_code == 0, result.output
    return "Work"


def add_todo(invoke, text, *args):
    result = invoke("add", text, "-c", "Work", *args)
    assert result.exit_code == 0, result.output
    return int(result.output.split("#")[1].split()[0])


class TestCategories:
    def test_add_and_list(self, invoke, work):
        result = invoke("categories", "list")
        assert result.exit_code == 0
        assert "Work" in result.output
        assert "2" in result.output

    def test_alias(self, invoke, work):
        assert "Work" in invoke("cat", "list").output

    def test_empty_list(self, invoke):
        assert "No categories" in invoke("categories", "list").output

    def test_duplicate_fails(self, invoke, work):
        result = invoke("categories", "add", "Work")
        assert result.exit_code == 1
        assert "Error: Category 'Work' already exists" in result.output

    def test_weight(self, invoke, work):
        result = invoke("categories", "weight", "Work", "4")
        assert result.exit_code == 0
        assert "to 4" in result.output

    def test_weight_out_of_range(self, invoke, work):
        result = invoke("categories", "weight", "Work", "9")
        assert result.exit_code == 1
        assert "between 0 and 5" in result.output

    def test_edit_rename(self, invoke, work):
        assert invoke("categories", "edit", "Work", "--name", "Job").exit_code == 0
        assert "Job" in invoke("categories", "list").output

    def test_remove_refused_with_todos(self, invoke, work):
        add_todo(invoke, "Report", "-p", "5", "-v", "5")
        result = invoke("categories", "remove", "Work", "--yes")
        assert result.exit_code == 1
        assert "because it has 1 todo(s)" in result.output

    def test_remove_confirmed(self, invoke, work):
        result = invoke("categories", "remove", "Work", input="y\n")
        assert result.exit_code == 0
        assert "deleted" in result.output


class TestAdd:
    def test_add_with_options(self, invoke, work):
        result = invoke("add", "Write report", "-c", "Work", "-p", "8", "-v", "6", "-t", "1.5", "-d", "2030-01-01")
        assert result.exit_code == 0, result.output
        assert "Todo #1 added successfully!" in result.output

    def test_prompts_for_missing_numbers(self, invoke, work):
        result = invoke("add", "Write report", "-c", "Work", input="7\n3\n")
        assert result.exit_code == 0, result.output
        assert "Priority (0-10)" in result.output

        show = json.loads(invoke("show", "1", "--json").output)
        assert (show["priority"], show["value"]) == (7, 3)

    def test_unknown_category(self, invoke, work):
        result = invoke("add", "x", "-c", "Nope", "-p", "1", "-v", "1")
        assert result.exit_code == 1
        assert "Error: Category 'Nope' does not exist" in result.output

    def test_out_of_range_priority(self, invoke, work):
        result = invoke("add", "x", "-c", "Work", "-p", "11", "-v", "1")
        assert result.exit_code == 1
        assert "Priority must be between 0 and 10" in result.output

    def test_bad_deadline(self, invoke, work):
        result = invoke("add", "x", "-c", "Work", "-p", "1", "-v", "1", "-d", "next week")
        assert result.exit_code == 2
        assert "not an ISO date" in result.output

    def test_missing_dependency(self, invoke, work):
        result = invoke("add", "x", "-c", "Work", "-p", "1", "-v", "1", "--depends-on", "42")
        assert result.exit_code == 1
        assert "Dependency todo #42 not found" in result.output


class TestList:
    def test_empty(self, invoke, work):
        assert "No todos found." in invoke("list").output

    def test_empty_category(self, invoke, work):
        assert "No todos found in category 'Work'." in invoke("list", "-c", "Work").output

    def test_ranked_table(self, invoke, work):
        low = add_todo(invoke, "Low value", "-p", "1", "-v", "1")
        high = add_todo(invoke, "High value", "-p", "10", "-v", "10")
        blocked = add_todo(invoke, "Blocked", "-p", "10", "-v", "10", "--depends-on", str(low))

        result = invoke("list")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "Score" in lines[0]
        body = lines[2:]
        assert "High value" in body[0]
        assert "Low value" in body[1]
        assert "Blocked" in body[2]
        assert f"#{low}" in body[2]

    def test_json_and_sort_by_id(self, invoke, work):
        low = add_todo(invoke, "Low value", "-p", "1", "-v", "1")
        high = add_todo(invoke, "High value", "-p", "10", "-v", "10")

        by_score = json.loads(invoke("list", "--json").output)
        assert [t["id"] for t in by_score] == [high, low]

        by_id = json.loads(invoke("ls", "--sort", "id", "--json").output)
        assert [t["id"] for t in by_id] == [low, high]
        assert by_id[0]["score"] >= 0

    def test_default_sort_from_config(self, invoke, work, monkeypatch):
        low = add_todo(invoke, "Low value", "-p", "1", "-v", "1")
        high = add_todo(invoke, "High value", "-p", "10", "-v", "10")
        monkeypatch.setattr(cli, "load_config", lambda: Config(default_sort="id"))

        ids = [t["id"] for t in json.loads(invoke("list", "--json").output)]
        assert ids == [low, high]

    def test_completed_hidden(self, invoke, work):
        todo_id = add_todo(invoke, "Done soon", "-p", "5", "-v", "5")
        assert invoke("done", str(todo_id)).exit_code == 0
        assert json.loads(invoke("list", "--json").output) == []


class TestTodoCommands:
    def test_show(self, invoke, work):
        todo_id = add_todo(invoke, "Write report", "-p", "8", "-v", "6")
        result = invoke("show", str(todo_id))
        assert result.exit_code == 0
        assert f"#{todo_id} Write report [open]" in result.output
        assert "Score:" in result.output

    def test_show_missing(self, invoke, work):
        result = invoke("show", "9")
        assert result.exit_code == 1
        assert "Todo #9 not found" in result.output

    def test_complete_missing(self, invoke, work):
        assert invoke("complete", "9").exit_code == 1

    def test_edit(self, invoke, work):
        todo_id = add_todo(invoke, "Write report", "-p", "8", "-v", "6", "-d", "2030-01-01")
        result = invoke("edit", str(todo_id), "--text", "Edit report", "-p", "3", "--clear-deadline")
        assert result.exit_code == 0, result.output

        show = json.loads(invoke("show", str(todo_id), "--json").output)
        assert show["text"] == "Edit report"
        assert show["priority"] == 3
        assert show["deadline"] is None

    def test_edit_adds_dependency(self, invoke, work):
        a = add_todo(invoke, "A", "-p", "5", "-v", "5")
        b = add_todo(invoke, "B", "-p", "5", "-v", "5")
        assert invoke("modify", str(b), "--depends-on", str(a)).exit_code == 0
        assert json.loads(invoke("show", str(b), "--json").output)["dependencies"] == [a]

    def test_edit_no_changes(self, invoke, work):
        todo_id = add_todo(invoke, "A", "-p", "5", "-v", "5")
        assert "No changes made." in invoke("edit", str(todo_id)).output

    def test_edit_missing(self, invoke, work):
        result = invoke("edit", "9", "-p", "1")
        assert result.exit_code == 1

    def test_remove_cancelled(self, invoke, work):
        todo_id = add_todo(invoke, "A", "-p", "5", "-v", "5")
        result = invoke("rm", str(todo_id), input="n\n")
        assert "Operation cancelled." in result.output
        assert invoke("show", str(todo_id)).exit_code == 0

    def test_remove_yes(self, invoke, work):
        todo_id = add_todo(invoke, "A", "-p", "5", "-v", "5")
        assert "deleted" in invoke("remove", str(todo_id), "--yes").output
        assert invoke("show", str(todo_id)).exit_code == 1


class TestProjects:
    def test_add_list_edit_remove(self, invoke, work):
        result = invoke("projects", "add", "Launch", "-c", "Work", "-w", "2", "--description", "Ship it")
        assert result.exit_code == 0, result.output
        assert "Project #1 'Launch' added." in result.output

        listing = invoke("projects", "list").output
        assert "Launch" in listing
        assert "Ship it" in listing

        assert invoke("projects", "edit", "1", "-w", "3").exit_code == 0
        assert " 3 " in invoke("projects", "list").output

        assert invoke("projects", "remove", "1", "--yes").exit_code == 0
        assert "No projects." in invoke("projects", "list").output

    def test_bad_weight(self, invoke, work):
        result = invoke("projects", "add", "Launch", "-c", "Work", "-w", "0")
        assert result.exit_code == 1
        assert "Project weight" in result.output

    def test_project_doubles_score(self, invoke, work):
        invoke("projects", "add", "Launch", "-c", "Work", "-w", "2")
        plain = add_todo(invoke, "Plain", "-p", "8", "-v", "8")
        boosted = add_todo(invoke, "Boosted", "-p", "8", "-v", "8", "--project", "1")

        todos = {t["id"]: t for t in json.loads(invoke("list", "--json").output)}
        assert todos[boosted]["score"] == pytest.approx(2 * todos[plain]["score"], rel=1e-3)
        assert todos[boosted]["project"] == "Launch"


class TestBadInput:
    def test_nan_time_required(self, invoke, work):
        result = invoke("add", "x", "-c", "Work", "-p", "5", "-v", "5", "-t", "nan")
        assert result.exit_code == 1
        assert "Error: Time required must be between 0 and 100 hours" in result.output

    def test_nan_project_weight(self, invoke, work):
        result = invoke("projects", "add", "P", "-c", "Work", "-w", "nan")
        assert result.exit_code == 1
        assert "Error: Project weight" in result.output

    def test_edit_empty_category(self, invoke, work):
        todo_id = add_todo(invoke, "A", "-p", "5", "-v", "5")
        result = invoke("edit", str(todo_id), "-c", "")
        assert result.exit_code == 1
        assert "Error: Category '' does not exist" in result.output

    def test_project_edit_empty_category(self, invoke, work):
        invoke("projects", "add", "Launch", "-c", "Work")
        result = invoke("projects", "edit", "1", "-c", "")
        assert result.exit_code == 1
        assert "Work" in invoke("projects", "list").output

    def test_category_rename_to_empty(self, invoke, work):
        result = invoke("categories", "edit", "Work", "--name", "")
        assert result.exit_code == 1
        assert "Error: Category name cannot be empty" in result.output

    def test_edit_with_bad_dependency_changes_nothing(self, invoke, work):
        todo_id = add_todo(invoke, "A", "-p", "5", "-v", "5")
        result = invoke("edit", str(todo_id), "-p", "1", "--depends-on", "42")
        assert result.exit_code == 1
        assert "Dependency todo #42 not found" in result.output
        assert json.loads(invoke("show", str(todo_id), "--json").output)["priority"] == 5

    def test_deadline_error_is_not_chained(self):
        with pytest.raises(click.BadParameter) as exc_info:
            cli._parse_deadline(None, None, "next week")
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__
