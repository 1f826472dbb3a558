"""The tally sub-commands: add, done, list, remove, prune, semver, tag and more."""