# trexshell

A small interactive shell for POSIX systems. It reads a line, splits it into
tokens, expands variables and runs the commands, joining them with pipes and
honouring redirections.

## Installing

    pip install .

## Running

    trexshell

The prompt waits for a command. End the session with `exit` or Ctrl-D
(which prints `exit` and leaves with status 0). Command-line arguments are
ignored.

## What it understands

- Commands: a name is looked up along `PATH` (the first owner-executable,
  non-directory match wins) and started with the shell's environment. A name
  not found on `PATH` is run as written, relative to the current directory.
- Pipes: `ls | grep py | wc -l`
- Redirections, applied left to right: `>` (truncate), `>>` (append),
  `<` (read; a missing file is created empty), `<<` (here-document ended by
  a line equal to the delimiter).
- Quotes: text in single quotes is kept as written; text in double quotes has
  `$NAME` expanded, the name running up to the next space. An unclosed quote
  is kept as an ordinary character.
- `$NAME` outside quotes takes the rest of the word as the name and expands
  from the environment first, then from local variables; an unknown name
  expands to nothing. `$?` gives the status of the last command. A word that
  is exactly `~` becomes `$HOME`.
- Local variables: `NAME=value` as the only word sets a shell-local variable;
  if the name is already in the environment, the environment is updated too.
  When other words follow the assignment, nothing is stored and the remaining
  words are run as a command.

## Built-in commands

| command  | effect                                                          |
|----------|-----------------------------------------------------------------|
| `cd`     | change directory; with no argument go to `$HOME`                |
| `echo`   | print each argument followed by a space; `-n` as the first argument drops the final newline |
| `env`    | list the environment as `NAME=value`                            |
| `export` | `export NAME=value`, or `export NAME` to export a local variable |
| `unset`  | remove names from both the environment and local variables      |
| `pwd`    | print the working directory                                     |
| `exit`   | leave the shell, optionally with a numeric status               |

`exit` with a non-numeric argument prints `exit`, reports
`numeric argument required` and leaves with status 2; with more than one
argument it reports `Too many arguments` and stays.

Most errors are reported on standard error as
`minishell: <command>: <message>` and set the status that `$?` reports.
A program that cannot be started gives status 127; Ctrl-C at the prompt or
during a here-document gives status 130 (an interrupted here-document is
empty).

## Using it from Python

    from trexshell.state import Shell
    from trexshell.shell import run_line

    shell = Shell.from_environ({"HOME": "/tmp", "PATH": "/usr/bin:/bin"})
    run_line(shell, "GREETING=hello")
    run_line(shell, 'echo "$GREETING world"')
    print(shell.status)

The pieces can also be used on their own: `trexshell.tokenizer.tokenize`
turns a line into `Token` objects, `trexshell.parser.parse_tokens` runs them,
`trexshell.executor.execute` runs one list of words, and
`trexshell.hashtable.HashTable` is the chained table that holds variables.
`run_line` and `parse_tokens` work on the process's real standard input and
output file descriptors.

## What it does not do

- No `;`, `&&`, `||`, background jobs, subshells, globbing or backslash
  escapes.
- Commands in a pipeline run one after another, not at the same time, so a
  command that writes more than a pipe can hold before the next one starts
  will block.
- There is no command that lists local variables; `trexshell.builtins.show_locals`
  does so only when called from Python.