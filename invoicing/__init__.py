"""Invoice domain: validation, mutations, page cache, form flow."""
