CATALOG_HTML = r"""<!doctype html>
<html lang="en" data-bs-theme="dark">
<head>
  <meta charset="utf-8">
  <title>{{ app_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    .path { color: rgba(255,255,255,.6); }
  </style>
</head>
<body>
<nav class="navbar navbar-expand-lg bg-body-tertiary px-3">
  <a class="navbar-brand" href="{{ url_for('servemap.catalog') }}">{{ app_title }}</a>
</nav>

<div class="container py-4">
  {% if not entries %}
    <div class="text-center py-5">
      <h4>No saves found.</h4>
      <p class="text-secondary">Drop <code>.sav</code> files into the save directory and reload.</p>
    </div>
  {% else %}
  <ul class="list-group">
    {% for e in entries %}
      <li class="list-group-item d-flex justify-content-between align-items-center">
        <a class="fw-semibold" href="{{ e.map_url }}" target="_blank" rel="noopener">{{ e.name }}</a>
        <a class="small path" href="{{ e.download_url }}">download latest</a>
      </li>
    {% endfor %}
  </ul>
  {% endif %}
</div>
</body>
</html>
"""
