# mdfmt

A Markdown formatter. `mdfmt` parses Markdown files (CommonMark with
tables and strikethrough) and writes them out again according to
consistent style rules: heading style and levels, list markers and
numbering, code fences, paragraph wrapping and whitespace.

## Installation

```
pip install .
```

## Command-line usage

```
mdfmt [OPTIONS] <files or directories...>
```

By default the formatted output is written to standard output.

Operation modes (only one may be given):

| Option          | Effect                                                        |
|-----------------|---------------------------------------------------------------|
| `-w, --write`   | Write formatted content back to the files that changed        |
| `-c, --check`   | Exit with status 1 if any file needs formatting               |
| `-l, --list`    | Print the paths of files that need formatting                 |
| `-d, --diff`    | Print a `---`/`+++` header for each file that would change    |

Other options:

- `--config <file>`: path to a configuration file
- `-v, --verbose`: report the files being processed
- `-q, --quiet`: suppress non-error output
- `-h, --help`: show help (written to standard error)
- `--version`: print version and build information

`-v` and `-q` cannot be combined.

Examples:

```
mdfmt README.md
mdfmt --write docs/
mdfmt --check README.md docs/
mdfmt --list docs/
mdfmt --config .mdfmt.yaml --write docs/
```

Exit codes: `0` success, `1` files need formatting (check mode only),
`2` error.

Directories are searched recursively, in name order, for files with the
configured extensions; paths matching the ignore patterns are skipped.
A file counts as changed when its content differs from the formatted
result once leading and trailing whitespace is ignored.

## Configuration

Without `--config`, `mdfmt` looks for `.mdfmt.yaml`, `.mdfmt.yml`,
`.mdfmt.json`, `mdfmt.yaml`, `mdfmt.yml` or `mdfmt.json` in the current
directory and then in each parent directory up to the filesystem root.
Settings in the file are laid over the built-in defaults, which are:

```yaml
line_width: 80

heading:
  style: "atx"              # atx (#) or setext (underlined, levels 1-2 only)
  normalize_levels: true    # clamp levels to 1..6

list:
  bullet_style: "-"         # -, *, or +
  number_style: "."         # . or )
  consistent_indentation: true

code:
  fence_style: "```"        # ``` or ~~~
  language_detection: true

whitespace:
  max_blank_lines: 2
  trim_trailing_spaces: true
  ensure_final_newline: true

files:
  extensions: [".md", ".markdown", ".mdown"]
  ignore_patterns: ["node_modules/**", ".git/**", "vendor/**"]
```

An invalid value (for example `line_width: 0` or an unknown bullet
style) is reported as an error and the program exits with status 2.

## Library usage

```python
from mdfmt.config import Config
from mdfmt.cli import format_markdown

cfg = Config.default()
cfg.validate()
print(format_markdown(b"# Title\n\n* one\n* two\n", cfg))
```

The pipeline can also be driven step by step:

- `mdfmt.parser.default_parser()` returns a `MarkdownParser` whose
  `parse()` produces a `mdfmt.nodes.Document`;
- `mdfmt.formatter.Engine().format(doc, cfg)` applies the formatting
  rules in place;
- `mdfmt.renderer.MarkdownRenderer().render(doc, cfg)` returns the
  Markdown text.

`mdfmt.processor.FileProcessor` finds Markdown files below given paths
and can run a function over them on a small thread pool.
`mdfmt.config.Config` loads (`load_from_file`), saves (`save_to_file`)
and checks (`validate`) configurations.

## Limitations

- `--diff` does not print a line-by-line diff; it only names the files
  that would be reformatted.
- The `code.language_detection` setting is accepted but has no effect.
- Only headings, paragraphs, lists and code blocks are written back.
  Block quotes, tables, thematic breaks and raw HTML blocks are left out
  of the formatted output, so formatting a file that contains them with
  `--write` removes them.
- Inside list items, content other than nested lists (such as code
  blocks or several paragraphs) is flattened into the item's text.
- Paragraphs that contain links are not rewrapped.