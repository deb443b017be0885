"""Extract JSDoc/TSDoc documentation from JS/TS sources and render MDX reference pages."""
