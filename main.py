#This file is for development purposes only

import logging
import sys

from jira_client_impl import JiraError, get_client


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    client = get_client(interactive=True)
    print(f"Connected with {client!r}")

    issue_key = sys.argv[1] if len(sys.argv) > 1 else "OPS-20"
    try:
        issue = client.issue.get_issue(issue_key, fields=["summary", "status"]).result()
        fields = issue.get("fields", {})
        print(f"- {issue['key']}: {fields.get('summary')} [{fields.get('status', {}).get('name')}]")
    except JiraError as e:
        print(f"Error fetching {issue_key}: {e}")

    try:
        transitions = client.issue.get_transitions(issue_key).result()
        for transition in transitions.get("transitions", []):
            print(f"  transition {transition['id']}: {transition['name']}")
    except JiraError as e:
        print(f"Error listing transitions: {e}")

if __name__ == "__main__":
    main()
