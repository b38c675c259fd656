"""Standalone HTML viewer for the generated `data-dictionary.json`."""

import html
from pathlib import Path
from string import Template

from api_dictionary.models import ApiInfo

FIELD_COLUMNS = [
    ("Operation ID", "operationId"),
    ("Method", "method"),
    ("Path", "path"),
    ("Location", "location"),
    ("HTTP Status", "httpStatus"),
    ("Field Path", "fieldPath"),
    ("Field Name", "fieldName"),
    ("Type", "type"),
    ("Item Type", "itemType"),
    ("Format", "format"),
    ("Required", "required"),
    ("Nullable", "nullable"),
    ("Description", "description"),
    ("Constraints", "constraints"),
    ("Example", "example"),
    ("Default", "default"),
    ("Schema Name", "schemaName"),
    ("Deprecated", "deprecated"),
    ("Read Only", "readOnly"),
    ("Write Only", "writeOnly"),
    ("Tags", "tags"),
    ("Source Ref", "sourceRef"),
    ("Issues", "issues"),
]

ENDPOINT_COLUMNS = [
    ("Method", "method"),
    ("Path", "path"),
    ("Operation ID", "operationId"),
    ("Tags", "tags"),
    ("Summary", "summary"),
    ("Description", "description"),
    ("Request Media Types", "requestMediaTypes"),
    ("Response Codes", "responseCodesAndMediaTypes"),
    ("Param Count", "parameterCount"),
]

SCHEMA_COLUMNS = [
    ("Name", "name"),
    ("Type", "type"),
    ("Description", "description"),
    ("Property Count", "propertyCount"),
    ("Required Fields", "required"),
]

PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Data Dictionary - $title</title>
  <style>
    body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; margin: 0; padding: 20px; background: #f5f5f5; }
    header { background: #1a365d; color: white; padding: 20px; border-radius: 8px 8px 0 0; }
    header h1 { margin: 0 0 8px 0; font-size: 1.5rem; }
    .tabs, .controls, .stats { background: white; padding: 10px 20px; }
    .tabs button { padding: 8px 16px; border: none; background: #e2e8f0; cursor: pointer; }
    .tabs button.active { background: #1a365d; color: white; }
    .controls input, .controls select { padding: 6px 10px; margin-right: 8px; }
    .stats { color: #4a5568; font-size: 0.85rem; border-top: 1px solid #e2e8f0; }
    table { border-collapse: collapse; width: 100%; background: white; font-size: 0.8rem; }
    th, td { border: 1px solid #e2e8f0; padding: 4px 6px; text-align: left; vertical-align: top; }
    th { background: #f7fafc; position: sticky; top: 0; }
    th.sortable { cursor: pointer; user-select: none; }
  </style>
</head>
<body>
  <header>
    <h1>API Data Dictionary</h1>
    <div>$title v$version</div>
  </header>
  <div class="tabs">
    <button class="active" data-tab="fieldInstances">Field Instances</button>
    <button data-tab="endpoints">Endpoints</button>
    <button data-tab="schemas">Schemas</button>
  </div>
  <div class="controls">
    <input type="text" id="search" placeholder="Search all columns...">
    <select id="filter-method"><option value="">All Methods</option></select>
    <select id="filter-location"><option value="">All Locations</option></select>
    <select id="filter-status"><option value="">All Status Codes</option></select>
    <a href="./data-dictionary.xlsx" download>Download Excel</a>
  </div>
  <div class="stats" id="stats">Loading data...</div>
  <table id="data-table"><thead></thead><tbody></tbody></table>
  <script>
    const COLUMNS = {
      fieldInstances: $field_columns,
      endpoints: $endpoint_columns,
      schemas: $schema_columns
    };
    let data = null;
    let currentTab = 'fieldInstances';
    let sortKey = null;
    let sortAscending = true;

    function fillSelect(id, values) {
      const select = document.getElementById(id);
      Array.from(new Set(values.filter(v => v))).sort().forEach(v => {
        const option = document.createElement('option');
        option.value = v;
        option.textContent = v;
        select.appendChild(option);
      });
    }

    function matches(row) {
      const search = document.getElementById('search').value.toLowerCase();
      if (search && !Object.values(row).some(v => String(v).toLowerCase().includes(search))) return false;
      if (currentTab !== 'fieldInstances') return true;
      const method = document.getElementById('filter-method').value;
      const location = document.getElementById('filter-location').value;
      const status = document.getElementById('filter-status').value;
      return (!method || row.method === method) && (!location || row.location === location)
        && (!status || row.httpStatus === status);
    }

    function render() {
      const columns = COLUMNS[currentTab];
      const rows = data[currentTab];
      const head = document.querySelector('#data-table thead');
      const body = document.querySelector('#data-table tbody');
      head.innerHTML = '';
      body.innerHTML = '';
      const headRow = head.insertRow();
      columns.forEach(c => {
        const th = document.createElement('th');
        th.textContent = c[0] + (sortKey === c[1] ? (sortAscending ? ' ▲' : ' ▼') : '');
        th.className = 'sortable';
        th.addEventListener('click', () => {
          sortAscending = sortKey === c[1] ? !sortAscending : true;
          sortKey = c[1];
          render();
        });
        headRow.appendChild(th);
      });
      const shown = rows.filter(matches);
      if (sortKey) {
        shown.sort((a, b) => {
          const order = String(a[sortKey] === undefined ? '' : a[sortKey])
            .localeCompare(String(b[sortKey] === undefined ? '' : b[sortKey]), undefined, { numeric: true });
          return sortAscending ? order : -order;
        });
      }
      shown.forEach(row => {
        const tr = body.insertRow();
        columns.forEach(c => { tr.insertCell().textContent = row[c[1]] === undefined ? '' : row[c[1]]; });
      });
      document.getElementById('stats').textContent = 'Showing ' + shown.length + ' of ' + rows.length;
    }

    fetch('./data-dictionary.json')
      .then(response => {
        if (!response.ok) throw new Error('Failed to load data dictionary');
        return response.json();
      })
      .then(json => {
        data = json;
        fillSelect('filter-method', data.fieldInstances.map(f => f.method));
        fillSelect('filter-location', data.fieldInstances.map(f => f.location));
        fillSelect('filter-status', data.fieldInstances.map(f => f.httpStatus));
        render();
      })
      .catch(error => { document.getElementById('stats').textContent = 'Error: ' + error.message; });

    ['search', 'filter-method', 'filter-location', 'filter-status'].forEach(id => {
      document.getElementById(id).addEventListener(id === 'search' ? 'input' : 'change', render);
    });
    document.querySelectorAll('.tabs button').forEach(button => {
      button.addEventListener('click', () => {
        document.querySelectorAll('.tabs button').forEach(b => b.classList.remove('active'));
        button.classList.add('active');
        currentTab = button.dataset.tab;
        sortKey = null;
        if (data) render();
      });
    });
  </script>
</body>
</html>
""")


def _js_columns(columns: list[tuple[str, str]]) -> str:
    return "[" + ", ".join(f"['{title}', '{key}']" for title, key in columns) + "]"


def render_html(api_info: ApiInfo) -> str:
    return PAGE.substitute(
        title=html.escape(api_info.title),
        version=html.escape(api_info.version),
        field_columns=_js_columns(FIELD_COLUMNS),
        endpoint_columns=_js_columns(ENDPOINT_COLUMNS),
        schema_columns=_js_columns(SCHEMA_COLUMNS),
    )


def write_html(api_info: ApiInfo, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_html(api_info), encoding="utf-8")
    return output
