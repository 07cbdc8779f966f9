"""Front end: types, syntax tree, scopes, diagnostics, printing and expression lowering."""