from __future__ import annotations

from html import escape


def render_homepage(*, app_name: str = "taskboard") -> str:
    return _PAGE.replace("__APP_NAME__", escape(app_name))


# View state (status, page, view) lives in the URL so a reload or shared link
# reproduces the same board.
_PAGE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Task Manager | __APP_NAME__</title>
  <style>
    :root {
      --bg: #f4f1ea;
      --panel: #fffdf8;
      --ink: #1c2430;
      --muted: #67707a;
      --accent: #2f6f8f;
      --line: #ddd6c8;
      --todo: #2563eb;
      --progress: #b7791f;
      --done: #2f855a;
    }
    * { box-sizing: border-box; }
    body { margin: 0; font-family: system-ui, sans-serif; color: var(--ink); background: var(--bg); }
    .wrap { max-width: 1000px; margin: 24px auto; padding: 0 16px; display: grid; gap: 16px; }
    .card { background: var(--panel); border: 1px solid var(--line); border-radius: 12px; padding: 16px; }
    .bar { display: flex; flex-wrap: wrap; gap: 8px; align-items: center; justify-content: space-between; }
    .muted { color: var(--muted); font-size: 0.9rem; }
    .tasks { display: grid; gap: 10px; }
    .tasks.grid { grid-template-columns: repeat(3, 1fr); align-items: start; }
    .column { display: grid; gap: 10px; }
    .column h3 { margin: 0; font-size: 1rem; }
    .task { border: 1px solid var(--line); border-radius: 10px; padding: 10px 12px; background: white; }
    .badge { font-size: 0.75rem; padding: 2px 8px; border-radius: 999px; border: 1px solid currentColor; }
    .TO_DO { color: var(--todo); } .IN_PROGRESS { color: var(--progress); } .DONE { color: var(--done); }
    button, select, input, textarea { font: inherit; padding: 6px 10px; border-radius: 8px; border: 1px solid var(--line); }
    button.primary { background: var(--accent); color: white; border-color: var(--accent); }
    #notice { min-height: 1.2em; }
    #notice.error { color: #b00020; }
  </style>
</head>
<body>
  <main class="wrap">
    <section class="card">
      <h1>Task Manager</h1>
      <p class="muted">Manage your tasks efficiently</p>
      <form id="create" class="bar">
        <input name="title" placeholder="Task title" maxlength="100" required>
        <input name="description" placeholder="Description (optional)" maxlength="500">
        <select name="status">
          <option value="TO_DO">To Do</option>
          <option value="IN_PROGRESS">In Progress</option>
          <option value="DONE">Done</option>
        </select>
        <button class="primary" type="submit">Add New Task</button>
      </form>
    </section>
    <section class="card">
      <div class="bar">
        <label>Filter by status:
          <select id="status">
            <option value="all">All Tasks</option>
            <option value="TO_DO">To Do</option>
            <option value="IN_PROGRESS">In Progress</option>
            <option value="DONE">Done</option>
          </select>
        </label>
        <span>
          <button data-view="list">List</button>
          <button data-view="grid">Grid</button>
        </span>
      </div>
      <p id="notice" class="muted"></p>
      <div id="tasks" class="tasks"></div>
      <div class="bar">
        <button id="prev">Previous</button>
        <span id="pageinfo" class="muted"></span>
        <button id="next">Next</button>
      </div>
    </section>
  </main>
  <script>
    const STATUSES = ["TO_DO", "IN_PROGRESS", "DONE"];
    const LABELS = { TO_DO: "To Do", IN_PROGRESS: "In Progress", DONE: "Done" };
    const EMPTY_MESSAGE = "No tasks found. Create your first task to get started!";

    function readState() {
      const params = new URLSearchParams(window.location.search);
      const page = Number.parseInt(params.get("page") || "1", 10);
      const status = params.get("status") || "all";
      return {
        status: STATUSES.includes(status) ? status : "all",
        page: Number.isFinite(page) && page > 0 ? page : 1,
        view: params.get("view") === "grid" ? "grid" : "list",
      };
    }

    function pushState(state) {
      const params = new URLSearchParams();
      if (state.status !== "all") params.set("status", state.status);
      params.set("page", String(state.page));
      if (state.view !== "list") params.set("view", state.view);
      history.pushState(null, "", "/?" + params.toString());
      load();
    }

    function notify(message, isError) {
      const el = document.getElementById("notice");
      el.textContent = message;
      el.className = isError ? "error" : "muted";
    }

    function renderTask(task) {
      const item = document.createElement("div");
      item.className = "task";
      const title = document.createElement("strong");
      title.textContent = task.title;
      const badge = document.createElement("span");
      badge.className = "badge " + task.status;
      badge.textContent = task.status.replace("_", " ");
      const description = document.createElement("p");
      description.className = "muted";
      description.textContent = task.description || "";
      const remove = document.createElement("button");
      remove.textContent = "Delete";
      remove.onclick = () => removeTask(task.id);
      item.append(title, " ", badge, description, remove);
      return item;
    }

    // Grid view groups the current page into one column per status.
    function renderColumns(tasks) {
      return STATUSES.map((status) => {
        const column = document.createElement("div");
        column.className = "column";
        column.dataset.status = status;
        const heading = document.createElement("h3");
        heading.className = status;
        heading.textContent = LABELS[status];
        column.append(heading, ...tasks.filter((task) => task.status === status).map(renderTask));
        return column;
      });
    }

    async function load() {
      const state = readState();
      document.getElementById("status").value = state.status;
      const params = new URLSearchParams({ page: String(state.page), limit: "10" });
      if (state.status !== "all") params.set("status", state.status);
      try {
        const response = await fetch("/tasks?" + params.toString());
        if (!response.ok) throw new Error("Failed to fetch tasks");
        const data = await response.json();
        const container = document.getElementById("tasks");
        container.className = "tasks " + state.view;
        const items = state.view === "grid" ? renderColumns(data.tasks) : data.tasks.map(renderTask);
        container.replaceChildren(...items);
        const notice = document.getElementById("notice");
        if (!data.tasks.length) {
          notify(EMPTY_MESSAGE);
        } else if (notice.textContent === EMPTY_MESSAGE || notice.className === "error") {
          notify("");
        }
        const p = data.pagination;
        document.getElementById("pageinfo").textContent =
          "Page " + p.page + " of " + Math.max(p.totalPages, 1) + " (" + p.total + " tasks)";
        document.getElementById("prev").disabled = !p.hasPrev;
        document.getElementById("next").disabled = !p.hasNext;
      } catch (err) {
        notify("Failed to fetch tasks. Please try again.", true);
      }
    }

    async function removeTask(id) {
      const response = await fetch("/tasks/" + encodeURIComponent(id), { method: "DELETE" });
      if (response.ok || response.status === 404) {
        notify("Task deleted successfully.");
        load();
      } else {
        notify("Failed to delete task. Please try again.", true);
      }
    }

    document.getElementById("status").onchange = (event) =>
      pushState({ ...readState(), status: event.target.value, page: 1 });
    document.getElementById("prev").onclick = () => {
      const state = readState();
      pushState({ ...state, page: state.page - 1 });
    };
    document.getElementById("next").onclick = () => {
      const state = readState();
      pushState({ ...state, page: state.page + 1 });
    };
    document.querySelectorAll("[data-view]").forEach((button) => {
      button.onclick = () => pushState({ ...readState(), view: button.dataset.view });
    });
    document.getElementById("create").onsubmit = async (event) => {
      event.preventDefault();
      const form = new FormData(event.target);
      const body = { title: form.get("title"), status: form.get("status") };
      if (form.get("description")) body.description = form.get("description");
      const response = await fetch("/tasks", {
        method: "POST",
        headers: { "Content-Type": "application/json" },
        body: JSON.stringify(body),
      });
      if (response.ok) {
        event.target.reset();
        notify("Task created successfully!");
        pushState({ ...readState(), page: 1 });
      } else {
        notify("Failed to create task. Please try again.", true);
      }
    };
    window.onpopstate = load;
    load();
  </script>
</body>
</html>
"""
