#!/usr/bin/env python3


def format_value(value):
    if value is None:
        return 'null'
    return str(value)


def render(result, output):
    """
    Write rows of result to output, one line per row with tab separated
    values. The column names are written once, before the first row.
    Nothing is written if result has no row.

    Return the number of rows written.
    """
    row_count = 0
    for row in result:
        if not row_count:
            output.write('\t'.join(result.column_names) + '\n')
        output.write('\t'.join(format_value(value) for value in row) + '\n')
        row_count += 1
    return row_count
