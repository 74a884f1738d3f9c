"""Built-in starter project.

Used on first startup and whenever the persisted project is missing or
corrupt. The contents are fixed; only ids and timestamps vary.
"""

import logging
from datetime import datetime
from typing import Callable

from ..schemas import FileVersion, Language, ProjectFile, ProjectState

logger = logging.getLogger(__name__)

INITIAL_TAG = "initial"

DEFAULT_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>My App</title>
  <style>
    /* Your CSS here */
    body {
      font-family: system-ui, sans-serif;
      margin: 0;
      padding: 20px;
      color: #333;
    }
    h1 {
      color: #3b82f6;
    }
    .container {
      max-width: 600px;
      margin: 0 auto;
    }
    button {
      background-color: #3b82f6;
      color: white;
      border: none;
      padding: 8px 16px;
      border-radius: 4px;
      cursor: pointer;
    }
    button:hover {
      background-color: #2563eb;
    }
  </style>
</head>
<body>
  <div class="container">
    <h1>Welcome to the Code Editor</h1>
    <p>This is a live preview of your HTML, CSS, and JavaScript.</p>
    <p>Edit the code on the left to see changes in real-time!</p>
    <button id="demo-button">Click Me!</button>
  </div>

  <script>
    // Your JavaScript here
    document.getElementById('demo-button').addEventListener('click', function() {
      alert('Button clicked!');
    });
  </script>
</body>
</html>"""

DEFAULT_REACT = """import React, { useState } from 'react';
import ReactDOM from 'react-dom';
import './styles.css';

function App() {
  const [count, setCount] = useState(0);

  return (
    <div className="container">
      <h1>React Counter Example</h1>
      <p>Current count: {count}</p>
      <button onClick={() => setCount(count + 1)}>
        Increment
      </button>
      <button onClick={() => setCount(count - 1)}>
        Decrement
      </button>
    </div>
  );
}

ReactDOM.render(<App />, document.getElementById('root'));"""

DEFAULT_CSS = """/* styles.css */
body {
  font-family: system-ui, sans-serif;
  margin: 0;
  padding: 20px;
  background-color: #f9fafb;
  color: #333;
}

.container {
  max-width: 600px;
  margin: 0 auto;
  background-color: white;
  padding: 20px;
  border-radius: 8px;
  box-shadow: 0 2px 4px rgba(0,0,0,0.1);
}

h1 {
  color: #3b82f6;
  margin-top: 0;
}

button {
  background-color: #3b82f6;
  color: white;
  border: none;
  padding: 8px 16px;
  border-radius: 4px;
  margin-right: 8px;
  cursor: pointer;
}

button:hover {
  background-color: #2563eb;
}"""

STARTER_FILES = (
    ("index.html", Language.HTML, DEFAULT_HTML),
    ("app.jsx", Language.JAVASCRIPT, DEFAULT_REACT),
    ("styles.css", Language.CSS, DEFAULT_CSS),
)


def build_starter_project(
    clock: Callable[[], datetime],
    id_factory: Callable[[], str],
    editor_theme: str,
) -> ProjectState:
    """Build the starter project with the first file active.

    Args:
        clock: Source of the initial versions' timestamp.
        id_factory: Source of file and version ids.
        editor_theme: Theme to record on the fresh project.
    """
    now = clock()
    files = [
        ProjectFile(
            id=id_factory(),
            name=name,
            language=language,
            content=content,
            versions=[FileVersion(id=id_factory(), timestamp=now, content=content, tag=INITIAL_TAG)],
        )
        for name, language, content in STARTER_FILES
    ]
    logger.info("Built starter project", extra={"file_count": len(files)})
    return ProjectState(files=files, active_file_id=files[0].id, editor_theme=editor_theme)
