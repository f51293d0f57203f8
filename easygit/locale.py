#!/usr/bin/env python3

import json
import logging
import os
from typing import Any, Dict, List

__all__ = [
    "LANGUAGES",
    "DEFAULT_LANGUAGE",
    "TRANSLATIONS",
    "LocaleService",
]

log = logging.getLogger(__name__)

LANGUAGES = ("en", "ko")
DEFAULT_LANGUAGE = "en"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        # Main menu
        "menu.welcome": "Make Git easier to use!",
        "menu.current_branch": "Current branch",
        "menu.what_to_do": "What would you like to do?",
        "menu.status": "📊 Status",
        "menu.staging": "📝 Staging",
        "menu.commit": "💾 Commit",
        "menu.push": "⬆️  Push",
        "menu.pull": "⬇️  Pull",
        "menu.branch": "🌿 Branch Management",
        "menu.rebase": "🔄 Rebase",
        "menu.rollback": "⏮️  Rollback",
        "menu.log": "📜 Commit Log",
        "menu.stash": "📦 Stash Management",
        "menu.remote": "🌐 Remote Management",
        "menu.custom": "⚡ Custom Commands",
        "menu.language": "🌐 Language Settings",
        "menu.exit": "🚪 Exit",
        "menu.goodbye": "Goodbye!",
        "menu.init_repo": "Initialize New Git Repository",
        # Common
        "common.back": "🔙 Back",
        "common.cancelled": "Cancelled.",
        "common.back_to_menu": "Return to main menu?",
        "common.done": "Done.",
        "error.prefix": "Error",
        "error.retry": "Would you like to retry?",
        "error.not_repository": "Not a Git repository.",
        "error.run_in_repo": "Please run in a Git repository directory.",
        "error.unknown_command": "Unknown command",
        "git.initialized": "Git repository initialized.",
        # CLI
        "cli.available_commands": "Available commands:",
        "cli.interactive_mode": "Interactive menu",
        "cli.clone_repo": "Clone repository",
        "cli.custom_commands": "Custom commands:",
        # Language
        "language.select": "Select Language:",
        "language.en": "English",
        "language.ko": "한국어",
        "language.changed": "Language changed.",
        # Input helpers
        "input.choose": "Choose",
        "input.invalid_choice": "Please enter one of the listed numbers.",
        "input.checkbox_hint": "Enter numbers separated by commas (a = all)",
        "input.min_selection": "Select at least {count}.",
        # Status
        "status.title": "📊 Git Status",
        "status.current_branch": "📍 Current branch:",
        "status.tracking": "Tracking {tracking} (↑{ahead} ↓{behind})",
        "status.staged": "✅ Staged:",
        "status.modified": "📝 Modified:",
        "status.untracked": "❓ Untracked:",
        "status.deleted": "🗑️  Deleted:",
        "status.conflicted": "⚠️  Conflicted:",
        "status.clean": "✨ Working directory is clean.",
        # Staging
        "staging.select_action": "Select staging action:",
        "staging.stage": "➕ Stage Files",
        "staging.unstage": "➖ Unstage Files",
        "staging.discard": "🗑️  Discard Changes",
        "staging.no_staged": "No staged files.",
        "staging.unstage_all": "Unstage all files",
        "staging.select_unstage": "Select files to unstage:",
        "staging.unstaged": "Files unstaged.",
        # Add
        "add.no_files": "No files to add.",
        "add.how": "How would you like to add files?",
        "add.all_files": "Add all files",
        "add.select_files": "Select specific files",
        "add.select_prompt": "Select files to add:",
        "add.all_added": "All files added.",
        "add.files_added": "{count} files added.",
        # Commit
        "commit.select_action": "Select commit action:",
        "commit.create": "💾 Create New Commit",
        "commit.view_log": "📜 View Commit Log",
        "commit.view_graph": "🌳 View Commit Graph",
        "commit.tag": "🏷️  Create Tag",
        "commit.message_prompt": "Commit message",
        "commit.message_empty": "Commit message cannot be empty.",
        "commit.nothing_staged": "No staged changes.",
        "commit.stage_all_first": "Stage all changes and commit?",
        "commit.success": "Commit created.",
        "commit.graph_count": "How many commits would you like to view?",
        "commit.no_commits": "No commit history found.",
        "commit.log_title": "📜 Commit Log",
        "commit.graph_title": "🌳 Commit Graph",
        # Push / pull
        "push.success": "Pushed to {remote}.",
        "push.setting_upstream": "Setting upstream to {remote}/{branch}.",
        "pull.success": "Pull completed.",
        "pull.auto_stash": "Stashing local changes before pull.",
        "pull.stash_kept": "Pull failed. Your local changes are still in the stash (git stash pop to restore).",
        # Branch
        "branch.title": "🌿 Branches",
        "branch.select_action": "Select branch action:",
        "branch.list": "📋 List Branches",
        "branch.switch": "🔀 Switch Branch",
        "branch.create": "➕ Create Branch",
        "branch.delete": "🗑️  Delete Branch",
        "branch.merge": "🔗 Merge Branch",
        "branch.merge_abort": "❌ Abort Merge",
        "branch.select_switch": "Select branch to switch to:",
        "branch.no_other": "There is no other branch.",
        "branch.name_prompt": "New branch name",
        "branch.name_empty": "Branch name cannot be empty.",
        "branch.created": "Branch '{name}' created.",
        "branch.switched": "Switched to '{name}'.",
        "branch.pulled": "Pulled new commits for '{name}'.",
        "branch.select_delete": "Select branch to delete:",
        "branch.force_delete": "Force delete even if unmerged?",
        "branch.deleted": "Branch '{name}' deleted.",
        "branch.select_merge": "Select branch to merge into the current branch:",
        "branch.merged": "Merged '{name}'.",
        "branch.merge_aborted": "Merge aborted.",
        # Rebase
        "rebase.select_action": "Select rebase action:",
        "rebase.branch": "🔄 Rebase Branch",
        "rebase.continue": "▶️  Continue Rebase",
        "rebase.skip": "⏭️  Skip Current Commit",
        "rebase.abort": "❌ Abort Rebase",
        "rebase.onto_prompt": "Rebase onto which branch?",
        "rebase.success": "Rebase finished.",
        # Rollback
        "rollback.select_action": "Select rollback action:",
        "rollback.revert": "🔄 Revert (Create new commit to undo changes)",
        "rollback.reset_soft": "↩️  Reset --soft (Keep changes staged)",
        "rollback.reset_mixed": "↩️  Reset --mixed (Keep changes unstaged)",
        "rollback.reset_hard": "⚠️  Reset --hard (Delete all changes)",
        "rollback.undo_last": "⏪ Undo Last Commit",
        "rollback.select_revert": "Select commit to revert:",
        "rollback.confirm_revert": "Are you sure you want to revert the selected commit?",
        "rollback.reverted": "Commit reverted.",
        "rollback.select_mode": "How would you like to reset?",
        "rollback.mode_soft": "Soft - Keep changes staged",
        "rollback.mode_mixed": "Mixed - Keep changes unstaged",
        "rollback.mode_hard": "Hard - Delete all changes ⚠️",
        "rollback.select_target": "Select commit to reset to:",
        "rollback.previous_commit": "HEAD~1 (previous commit)",
        "rollback.confirm_hard": "All uncommitted changes will be deleted. Continue?",
        "rollback.reset_done": "Reset completed.",
        # Stash
        "stash.title": "📦 Stashes",
        "stash.select_action": "Select stash action:",
        "stash.save": "💾 Save Stash",
        "stash.pop": "📤 Pop Stash",
        "stash.list": "📋 List Stashes",
        "stash.drop": "🗑️  Drop Stash",
        "stash.clear": "🧹 Clear All Stashes",
        "stash.message_prompt": "Stash message (optional)",
        "stash.saved": "Changes stashed.",
        "stash.popped": "Stash restored.",
        "stash.empty": "No stashes.",
        "stash.select_drop": "Select stash to drop:",
        "stash.dropped": "Stash dropped.",
        "stash.confirm_clear": "Delete every stash?",
        "stash.cleared": "All stashes cleared.",
        # Remote
        "remote.title": "🌐 Remotes",
        "remote.select_action": "Select remote action:",
        "remote.list": "📋 List Remotes",
        "remote.add": "➕ Add Remote",
        "remote.remove": "🗑️  Remove Remote",
        "remote.fetch": "🔄 Fetch",
        "remote.none": "No remotes configured.",
        "remote.name_prompt": "Remote name",
        "remote.url_prompt": "Remote URL",
        "remote.added": "Remote '{name}' added.",
        "remote.select_remove": "Select remote to remove:",
        "remote.removed": "Remote '{name}' removed.",
        "remote.fetched": "Fetch completed.",
        # Tag
        "tag.name_prompt": "Tag name",
        "tag.message_prompt": "Tag message (empty for a lightweight tag)",
        "tag.created": "Tag '{name}' created.",
        # Discard
        "discard.select_files": "Select files to discard:",
        "discard.nothing": "No changes to discard.",
        "discard.confirm": "Discarded changes cannot be recovered. Continue?",
        "discard.done": "{count} files discarded.",
        # Custom commands
        "custom.title": "📋 Custom Commands",
        "custom.select_action": "Manage custom commands:",
        "custom.execute": "▶️  Run Custom Command",
        "custom.list": "📋 List Custom Commands",
        "custom.add": "➕ Add New Command",
        "custom.remove": "🗑️  Delete Command",
        "custom.settings": "⚙️  Show Settings",
        "custom.reset": "🔄 Reset to Defaults",
        "custom.none": "No custom commands registered.",
        "custom.select_execute": "Select command to run:",
        "custom.running": "🚀 Running custom command: {name}",
        "custom.completed": "✅ '{name}' completed!",
        "custom.add_title": "➕ Add New Custom Command",
        "custom.add_hint": 'It will be used as "eg <name>".',
        "custom.name_prompt": "Command name",
        "custom.description_prompt": "Description",
        "custom.description_empty": "Description cannot be empty.",
        "custom.action_prompt": "Action {number} - what should it do?",
        "custom.add_all_prompt": "Add all files?",
        "custom.more_actions": "Add another action?",
        "custom.added": "Command '{name}' added!",
        "custom.usage": "Usage: eg {name}",
        "custom.select_remove": "Select command to delete:",
        "custom.confirm_remove": "Really delete the '{name}' command?",
        "custom.removed": "Command '{name}' deleted.",
        "custom.not_found": "Custom command '{name}' not found.",
        "custom.confirm_reset": "Reset settings to defaults? (All custom commands will be deleted)",
        "custom.reset_done": "Settings reset to defaults.",
        "settings.title": "⚙️  Easy Git Settings",
        "settings.default_branch": "Default branch: {value}",
        "settings.auto_stash": "Auto stash: {value}",
        "settings.auto_pull": "Auto pull on branch switch: {value}",
        "settings.command_count": "Custom commands: {value}",
        # Clone
        "clone.url_prompt": "Repository URL",
        "clone.url_empty": "URL cannot be empty.",
        "clone.dir_prompt": "Directory to clone into",
        "clone.cloning": "Cloning {url}...",
        "clone.success": "Cloned into {directory}.",
    },
    "ko": {
        "menu.welcome": "Git을 더 쉽게 사용하세요!",
        "menu.current_branch": "현재 브랜치",
        "menu.what_to_do": "무엇을 하시겠습니까?",
        "menu.status": "📊 상태 확인 (Status)",
        "menu.staging": "📝 스테이징 (Staging)",
        "menu.commit": "💾 커밋 (Commit)",
        "menu.push": "⬆️  푸시 (Push)",
        "menu.pull": "⬇️  풀 (Pull)",
        "menu.branch": "🌿 브랜치 관리",
        "menu.rebase": "🔄 Rebase",
        "menu.rollback": "⏮️  되돌리기 (Rollback)",
        "menu.log": "📜 커밋 로그",
        "menu.stash": "📦 Stash 관리",
        "menu.remote": "🌐 Remote 관리",
        "menu.custom": "⚡ 커스텀 커맨드",
        "menu.language": "🌐 언어 설정",
        "menu.exit": "🚪 종료",
        "menu.goodbye": "안녕히 가세요!",
        "menu.init_repo": "새 Git 저장소 초기화",
        "common.back": "🔙 돌아가기",
        "common.cancelled": "취소되었습니다.",
        "common.back_to_menu": "메인 메뉴로 돌아가시겠습니까?",
        "common.done": "완료되었습니다.",
        "error.prefix": "오류",
        "error.retry": "다시 시도하시겠습니까?",
        "error.not_repository": "Git 저장소가 아닙니다.",
        "error.run_in_repo": "Git 저장소 디렉토리에서 실행해주세요.",
        "error.unknown_command": "알 수 없는 명령어",
        "git.initialized": "Git 저장소가 초기화되었습니다.",
        "cli.available_commands": "사용 가능한 명령어:",
        "cli.interactive_mode": "인터랙티브 메뉴",
        "cli.clone_repo": "저장소 클론",
        "cli.custom_commands": "커스텀 명령어:",
        "language.select": "언어를 선택하세요:",
        "language.changed": "언어가 변경되었습니다.",
        "input.choose": "선택",
        "input.invalid_choice": "목록에 있는 번호를 입력하세요.",
        "input.checkbox_hint": "쉼표로 구분된 번호를 입력하세요 (a = 전체)",
        "input.min_selection": "최소 {count}개를 선택해야 합니다.",
        "status.title": "📊 Git 상태",
        "status.current_branch": "📍 현재 브랜치:",
        "status.tracking": "{tracking} 추적 중 (↑{ahead} ↓{behind})",
        "status.staged": "✅ 스테이징됨:",
        "status.modified": "📝 수정됨:",
        "status.untracked": "❓ 추적되지 않음:",
        "status.deleted": "🗑️  삭제됨:",
        "status.conflicted": "⚠️  충돌:",
        "status.clean": "✨ 작업 디렉토리가 깨끗합니다.",
        "staging.select_action": "스테이징 작업을 선택하세요:",
        "staging.stage": "➕ 파일 스테이징",
        "staging.unstage": "➖ 스테이징 취소",
        "staging.discard": "🗑️  변경사항 버리기",
        "staging.no_staged": "스테이징된 파일이 없습니다.",
        "staging.unstage_all": "모든 파일 스테이징 취소",
        "staging.select_unstage": "스테이징을 취소할 파일을 선택하세요:",
        "staging.unstaged": "스테이징이 취소되었습니다.",
        "add.no_files": "추가할 파일이 없습니다.",
        "add.how": "파일을 어떻게 추가하시겠습니까?",
        "add.all_files": "모든 파일 추가",
        "add.select_files": "특정 파일 선택",
        "add.select_prompt": "추가할 파일을 선택하세요:",
        "add.all_added": "모든 파일이 추가되었습니다.",
        "add.files_added": "{count}개 파일이 추가되었습니다.",
        "commit.select_action": "커밋 작업을 선택하세요:",
        "commit.create": "💾 새 커밋 생성",
        "commit.view_log": "📜 커밋 로그 보기",
        "commit.view_graph": "🌳 커밋 그래프 보기",
        "commit.tag": "🏷️  태그 생성",
        "commit.message_prompt": "커밋 메시지",
        "commit.message_empty": "커밋 메시지는 비워둘 수 없습니다.",
        "commit.nothing_staged": "스테이징된 변경사항이 없습니다.",
        "commit.stage_all_first": "모든 변경사항을 추가하고 커밋하시겠습니까?",
        "commit.success": "커밋이 생성되었습니다.",
        "commit.graph_count": "몇 개의 커밋을 보시겠습니까?",
        "commit.no_commits": "커밋 기록이 없습니다.",
        "commit.log_title": "📜 커밋 로그",
        "commit.graph_title": "🌳 커밋 그래프",
        "push.success": "{remote}에 푸시되었습니다.",
        "push.setting_upstream": "업스트림을 {remote}/{branch}로 설정합니다.",
        "pull.success": "Pull이 완료되었습니다.",
        "pull.auto_stash": "Pull 전에 로컬 변경사항을 stash합니다.",
        "pull.stash_kept": "Pull에 실패했습니다. 로컬 변경사항은 stash에 남아 있습니다 (git stash pop으로 복원).",
        "branch.title": "🌿 브랜치 목록",
        "branch.select_action": "브랜치 작업을 선택하세요:",
        "branch.list": "📋 브랜치 목록",
        "branch.switch": "🔀 브랜치 전환",
        "branch.create": "➕ 브랜치 생성",
        "branch.delete": "🗑️  브랜치 삭제",
        "branch.merge": "🔗 브랜치 병합",
        "branch.merge_abort": "❌ 병합 중단",
        "branch.select_switch": "전환할 브랜치를 선택하세요:",
        "branch.no_other": "전환할 수 있는 다른 브랜치가 없습니다.",
        "branch.name_prompt": "새 브랜치 이름",
        "branch.name_empty": "브랜치 이름은 비워둘 수 없습니다.",
        "branch.created": "'{name}' 브랜치가 생성되었습니다.",
        "branch.switched": "'{name}' 브랜치로 전환되었습니다.",
        "branch.pulled": "'{name}' 브랜치의 새 커밋을 가져왔습니다.",
        "branch.select_delete": "삭제할 브랜치를 선택하세요:",
        "branch.force_delete": "병합되지 않았어도 강제로 삭제하시겠습니까?",
        "branch.deleted": "'{name}' 브랜치가 삭제되었습니다.",
        "branch.select_merge": "현재 브랜치에 병합할 브랜치를 선택하세요:",
        "branch.merged": "'{name}' 브랜치가 병합되었습니다.",
        "branch.merge_aborted": "병합이 중단되었습니다.",
        "rebase.select_action": "Rebase 작업을 선택하세요:",
        "rebase.branch": "🔄 브랜치 Rebase",
        "rebase.continue": "▶️  Rebase 계속",
        "rebase.skip": "⏭️  현재 커밋 건너뛰기",
        "rebase.abort": "❌ Rebase 중단",
        "rebase.onto_prompt": "어느 브랜치 위로 rebase 하시겠습니까?",
        "rebase.success": "Rebase가 완료되었습니다.",
        "rollback.select_action": "되돌리기 작업을 선택하세요:",
        "rollback.revert": "🔄 Revert (변경사항을 취소하는 새 커밋 생성)",
        "rollback.reset_soft": "↩️  Reset --soft (변경사항을 스테이징 상태로 유지)",
        "rollback.reset_mixed": "↩️  Reset --mixed (변경사항을 언스테이징 상태로 유지)",
        "rollback.reset_hard": "⚠️  Reset --hard (모든 변경사항 삭제)",
        "rollback.undo_last": "⏪ 마지막 커밋 취소",
        "rollback.select_revert": "되돌릴 커밋을 선택하세요:",
        "rollback.confirm_revert": "선택한 커밋을 정말 되돌리시겠습니까?",
        "rollback.reverted": "커밋이 되돌려졌습니다.",
        "rollback.select_mode": "어떻게 reset 하시겠습니까?",
        "rollback.mode_soft": "Soft - 변경사항을 스테이징 상태로 유지",
        "rollback.mode_mixed": "Mixed - 변경사항을 언스테이징 상태로 유지",
        "rollback.mode_hard": "Hard - 모든 변경사항 삭제 ⚠️",
        "rollback.select_target": "reset 할 커밋을 선택하세요:",
        "rollback.previous_commit": "HEAD~1 (이전 커밋)",
        "rollback.confirm_hard": "커밋되지 않은 모든 변경사항이 삭제됩니다. 계속하시겠습니까?",
        "rollback.reset_done": "Reset이 완료되었습니다.",
        "stash.title": "📦 Stash 목록",
        "stash.select_action": "Stash 작업을 선택하세요:",
        "stash.save": "💾 Stash 저장",
        "stash.pop": "📤 Stash 복원",
        "stash.list": "📋 Stash 목록",
        "stash.drop": "🗑️  Stash 삭제",
        "stash.clear": "🧹 모든 Stash 삭제",
        "stash.message_prompt": "Stash 메시지 (선택사항)",
        "stash.saved": "Stash 저장됨",
        "stash.popped": "Stash 복원됨",
        "stash.empty": "Stash가 없습니다.",
        "stash.select_drop": "삭제할 stash를 선택하세요:",
        "stash.dropped": "Stash가 삭제되었습니다.",
        "stash.confirm_clear": "모든 stash를 삭제하시겠습니까?",
        "stash.cleared": "모든 stash가 삭제되었습니다.",
        "remote.title": "🌐 Remote 목록",
        "remote.select_action": "Remote 작업을 선택하세요:",
        "remote.list": "📋 Remote 목록",
        "remote.add": "➕ Remote 추가",
        "remote.remove": "🗑️  Remote 삭제",
        "remote.fetch": "🔄 Fetch",
        "remote.none": "설정된 remote가 없습니다.",
        "remote.name_prompt": "Remote 이름",
        "remote.url_prompt": "Remote URL",
        "remote.added": "'{name}' remote가 추가되었습니다.",
        "remote.select_remove": "삭제할 remote를 선택하세요:",
        "remote.removed": "'{name}' remote가 삭제되었습니다.",
        "remote.fetched": "Fetch가 완료되었습니다.",
        "tag.name_prompt": "태그 이름",
        "tag.message_prompt": "태그 메시지 (비우면 lightweight 태그)",
        "tag.created": "'{name}' 태그가 생성되었습니다.",
        "discard.select_files": "변경사항을 버릴 파일을 선택하세요:",
        "discard.nothing": "버릴 변경사항이 없습니다.",
        "discard.confirm": "버린 변경사항은 복구할 수 없습니다. 계속하시겠습니까?",
        "discard.done": "{count}개 파일의 변경사항을 버렸습니다.",
        "custom.title": "📋 등록된 커스텀 커맨드",
        "custom.select_action": "커스텀 커맨드 관리:",
        "custom.execute": "▶️  커스텀 커맨드 실행",
        "custom.list": "📋 커스텀 커맨드 목록",
        "custom.add": "➕ 새 커맨드 추가",
        "custom.remove": "🗑️  커맨드 삭제",
        "custom.settings": "⚙️  설정 보기",
        "custom.reset": "🔄 기본값으로 초기화",
        "custom.none": "등록된 커스텀 커맨드가 없습니다.",
        "custom.select_execute": "실행할 커맨드를 선택하세요:",
        "custom.running": "🚀 커스텀 커맨드 실행: {name}",
        "custom.completed": "✅ '{name}' 커맨드 완료!",
        "custom.add_title": "➕ 새 커스텀 커맨드 추가",
        "custom.add_hint": '"eg <커맨드이름>" 형태로 사용됩니다.',
        "custom.name_prompt": "커맨드 이름",
        "custom.description_prompt": "설명",
        "custom.description_empty": "설명은 비워둘 수 없습니다.",
        "custom.action_prompt": "액션 {number} - 어떤 작업을 추가하시겠습니까?",
        "custom.add_all_prompt": "모든 파일을 추가하시겠습니까?",
        "custom.more_actions": "액션을 더 추가하시겠습니까?",
        "custom.added": "커맨드 '{name}'이 추가되었습니다!",
        "custom.usage": "사용법: eg {name}",
        "custom.select_remove": "삭제할 커맨드를 선택하세요:",
        "custom.confirm_remove": "정말로 '{name}' 커맨드를 삭제하시겠습니까?",
        "custom.removed": "커스텀 커맨드 '{name}'이 삭제되었습니다.",
        "custom.not_found": "커스텀 커맨드 '{name}'을 찾을 수 없습니다.",
        "custom.confirm_reset": "설정을 기본값으로 초기화하시겠습니까? (모든 커스텀 커맨드가 삭제됩니다)",
        "custom.reset_done": "설정이 기본값으로 초기화되었습니다.",
        "settings.title": "⚙️  Easy Git 설정",
        "settings.default_branch": "기본 브랜치: {value}",
        "settings.auto_stash": "자동 Stash: {value}",
        "settings.auto_pull": "브랜치 전환시 자동 Pull: {value}",
        "settings.command_count": "커스텀 커맨드 개수: {value}",
        "clone.url_prompt": "저장소 URL",
        "clone.url_empty": "URL은 비워둘 수 없습니다.",
        "clone.dir_prompt": "클론할 디렉토리",
        "clone.cloning": "{url} 클론 중...",
        "clone.success": "{directory}에 클론되었습니다.",
    },
}


class LocaleService:
    """Persisted language preference plus message lookup.

    The preference is a JSON document of the form ``{"language": "en"}``. An
    unreadable or unknown preference falls back to English.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.language = self._load()

    def _load(self) -> str:
        if not os.path.exists(self.path):
            return DEFAULT_LANGUAGE
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Failed to read locale from {self.path}: {e!s}")
            return DEFAULT_LANGUAGE
        language = data.get("language") if isinstance(data, dict) else None
        if language not in LANGUAGES:
            log.debug("Unknown language %r, using %s", language, DEFAULT_LANGUAGE)
            return DEFAULT_LANGUAGE
        return language

    def available(self) -> List[str]:
        return list(LANGUAGES)

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"language": language}, f, indent=2)

    def t(self, key: str, **kwargs: Any) -> str:
        """Translate key, falling back to English and then to the key itself."""
        text = TRANSLATIONS[self.language].get(key)
        if text is None:
            text = TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
        return text.format(**kwargs) if kwargs else text
