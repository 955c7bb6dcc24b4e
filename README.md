# qcsv

`qcsv` is a command-line toolkit for CSV data. It can show records one at a time, reformat CSV, join files, count values, split rows into files, convert JSON lines, and take random samples. It needs only the Python standard library.

## Installation

```
pip install .
```

## Usage

Every operation is a subcommand of `qcsv`:

```
qcsv <command> [options] [<input>]
qcsv --help
```

If no input file is given, or the input is `-`, data is read from standard input. Output goes to standard output unless `-o/--output <file>` is given. Most commands also accept `-d/--delimiter <char>` (a single character, or `\t` for tab) and `-n/--no-headers`. When a command fails, the error message goes to standard error and the exit status is 1.

### Commands

| Command     | What it does |
|-------------|--------------|
| `flatten`   | Prints each field as an aligned `header<TAB>value` line. Records are separated by `#`, which `--separator` changes and an empty separator turns off. `--condense N` cuts fields to N characters and adds `...`. With `--no-headers` the label is the 0-based field position. |
| `fmt`       | Writes CSV with another delimiter (`-t/--out-delimiter`), CRLF line endings (`--crlf`), ASCII unit and record separators (`--ascii`), another quote character (`--quote`), `--quote-always` or `--quote-never`, or an escape character in place of doubled quotes (`--escape`). |
| `input`     | Reads CSV that uses an unusual `--quote` or `--escape` character, or no quoting at all (`--no-quoting`), and writes standard CSV. |
| `headers`   | Lists the column names, numbered from 1. `-j/--just-names` leaves out the numbers, and so does giving more than one file. `--intersect` lists each name only once across all files. |
| `index`     | Writes `<input>.idx`, an index of record offsets, or the path given with `-o`. `sample` and `frequency` use the index when it exists. If the CSV file changes after the index was made, they report an error until the index is created again. |
| `rename`    | Replaces the whole header row, e.g. `qcsv rename id,name,title data.csv`. The new row is parsed as CSV and must have as many fields as the old one. With `--no-headers` the new row is put above the data. |
| `reverse`   | Reverses the order of the rows. The header row stays first. |
| `replace`   | Replaces regex matches in the columns chosen with `-s/--select` (all columns by default). `$1`, `${name}` and `$$` may be used in the replacement. `-i/--ignore-case` matches without regard to case. Character classes are ASCII-only unless `-u/--unicode` is given or the `QCSV_REGEX_UNICODE` environment variable is set. |
| `pseudo`    | Replaces each distinct value of one column with an identifier, counting from 0 in the order the values first appear. |
| `jsonl`     | Converts newline-delimited JSON to CSV. The columns are taken from the first line, and nested object keys become dotted names such as `a.b`. Arrays are written as their JSON items joined by commas. |
| `sample`    | Takes a uniform random sample of rows. `--seed` makes the sample reproducible. A size between 0 and 1 is a fraction of the rows, and that needs an index. With an index, no seed and a sample of at most 10% of the rows, only the sampled records are read. |
| `frequency` | Writes a `field,value,count` table for each column. `-s/--select` chooses the columns. `-l/--limit` sets how many values are kept (default 10, 0 for all), and `-a/--asc` sorts by ascending count. Values are trimmed, and empty values are shown as `(NULL)` unless `--no-nulls` is given. With an index, `-j/--jobs` counts in parallel. |
| `partition` | Writes the rows into one file per distinct value of a column inside an output directory. File names are made safe and unique and follow `--filename` (default `{}.csv`). `-p/--prefix-length` groups rows by the first N bytes of the value, and `--drop` leaves the column out. |
| `foreach`   | Runs a command once per row, with `{}` replaced by the column value. `-u/--unify` treats each command's output as CSV and writes one header only, and `-c/--new-column` adds the current value as a column. It does not run on Windows. |
| `join`      | Joins two files on key columns. The default is an inner join; the others are `--left`, `--left-anti`, `--left-semi`, `--right`, `--full` and `--cross`. Keys are compared with surrounding whitespace stripped. `--no-case` compares them without regard to case, and `--nulls` lets empty keys match. |

### Column selection

Where a command takes columns, you can name them or give their 1-based index. Separate several columns with commas. Write a range with `-` (`2-4`, `name-`) and put `!` in front to invert the selection. A quoted name such as `"a,b"` may contain commas, and `name[1]` picks the second column called `name`. Names cannot be used with `--no-headers`.

### Examples

```
qcsv flatten --condense 20 data.csv
qcsv fmt --out-delimiter ';' --crlf data.csv -o out.csv
qcsv frequency --select h1 --limit 0 data.csv
qcsv join id people.csv person_id orders.csv --left
qcsv partition state out/ data.csv
qcsv index data.csv
qcsv sample 100 --seed 42 data.csv
qcsv jsonl events.jsonl -o events.csv
qcsv foreach name 'echo {}' data.csv
```

Run `qcsv <command> --help` for the full list of options of a command.

## What qcsv does not do

`qcsv` covers only the commands listed above. It cannot select, sort, slice, search, deduplicate, validate or transpose rows, and it does not compute summary statistics. It has no commands that evaluate scripting expressions on rows, and none that generate test data.